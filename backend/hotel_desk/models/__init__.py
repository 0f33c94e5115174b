# Ontology Models
from hotel_desk.models.ontology import (
    Room, Guest, Reservation, Manager,
    RoomType, RoomStatus, ReservationStatus, ManagerRole
)

__all__ = [
    'Room', 'Guest', 'Reservation', 'Manager',
    'RoomType', 'RoomStatus', 'ReservationStatus', 'ManagerRole'
]
