"""
TeenLife Hours Backend — Services Layer
=========================================

Service Inventory:
    - recognition:            PVSA tier and milestone calculator (pure)
    - NotificationService:    notification emitter and per-user feed
    - VolunteerService:       hour entries and the verification workflow

Services take the request's AsyncSession and only flush; the session
dependency owns the commit.
"""
