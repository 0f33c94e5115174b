# API Routers
from hotel_desk.routers import auth, managers, rooms, reservations, guests, reports

__all__ = ['auth', 'managers', 'rooms', 'reservations', 'guests', 'reports']
