# Business Services
from hotel_desk.services.room_service import RoomService
from hotel_desk.services.reservation_service import ReservationService
from hotel_desk.services.guest_service import GuestService
from hotel_desk.services.manager_service import ManagerService
from hotel_desk.services.report_service import ReportService

__all__ = [
    'RoomService', 'ReservationService', 'GuestService',
    'ManagerService', 'ReportService'
]
