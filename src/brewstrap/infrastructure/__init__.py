"""Infrastructure layer — child processes, filesystem, host wiring.

This layer depends on stdlib only.
The service layer bridges between domain records and infrastructure.
"""
