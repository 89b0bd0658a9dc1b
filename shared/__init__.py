"""
Shared Kernel

Base classes and utilities shared across the domain apps: value objects,
domain events and errors, the unit of work, the message bus and the DRF
error translation.
"""
