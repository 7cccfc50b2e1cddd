"""
PowerShield domain services.

Each service owns one collection and is constructed once at startup
with the shared database handle (see powershield.dependencies).
"""
