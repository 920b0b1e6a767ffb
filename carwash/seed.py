# carwash/seed.py
"""
Built-in sample data. Used when a storage slot is missing (first launch)
and by the factory-reset action. Functions return fresh objects every call.
"""

from carwash.schemas.conversation import Channel, Conversation, Message
from carwash.schemas.customer import Customer
from carwash.schemas.service import ServiceRecord, ServiceStatus, ServiceType


def sample_services() -> list[ServiceRecord]:
    # Most recent first, like the live collection
    return [
        ServiceRecord(id="TKT-0005", plate="ABC-123", customer_name="Carlos Mendoza", phone="987654321",
                      service_type=ServiceType.PREMIUM, price=45.0, status=ServiceStatus.IN_PROCESS,
                      entry_time="10:15", customer_id="C-1001"),
        ServiceRecord(id="TKT-0004", plate="XYZ-789", customer_name="María Torres", phone="912345678",
                      service_type=ServiceType.BASIC, price=25.0, status=ServiceStatus.WAITING,
                      entry_time="10:40", customer_id="C-1002"),
        ServiceRecord(id="TKT-0003", plate="DEF-456", customer_name="Jorge Ramírez", phone="998877665",
                      service_type=ServiceType.DETAIL, price=60.0, status=ServiceStatus.DEBT,
                      entry_time="09:30", notes="Paga el viernes", customer_id="C-1003"),
        ServiceRecord(id="TKT-0002", plate="GHI-321", customer_name="Lucía Fernández", phone="955443322",
                      service_type=ServiceType.FULL, price=80.0, status=ServiceStatus.READY,
                      entry_time="08:50", customer_id="C-1004"),
        ServiceRecord(id="TKT-0001", plate="PQR-852", customer_name="Pedro Salas", phone="944112233",
                      service_type=ServiceType.WAX, price=35.0, status=ServiceStatus.DELIVERED,
                      entry_time="08:10", exit_time="09:05", customer_id="C-1005"),
    ]


def sample_customers() -> list[Customer]:
    return [
        Customer(id="C-1001", name="Carlos Mendoza", phone="987654321", plate="ABC-123",
                 total_visits=5, total_spent=215.0),
        Customer(id="C-1002", name="María Torres", phone="912345678", plate="XYZ-789",
                 total_visits=2, total_spent=90.0),
        Customer(id="C-1003", name="Jorge Ramírez", phone="998877665", plate="DEF-456",
                 total_visits=3, total_spent=120.0, has_debt=True),
        Customer(id="C-1004", name="Lucía Fernández", phone="955443322", plate="GHI-321",
                 total_visits=1, total_spent=80.0),
        Customer(id="C-1005", name="Pedro Salas", phone="944112233", plate="PQR-852",
                 total_visits=1, total_spent=35.0),
    ]


def sample_conversations() -> list[Conversation]:
    return [
        Conversation(
            id="CONV-1", customer_name="Carlos Mendoza", plate="ABC-123", channel=Channel.WHATSAPP,
            last_message="Hola, ¿mi auto ya está listo?", unread_count=1,
            messages=[
                Message(id="M-1", sender="user", content="Hola, ¿mi auto ya está listo?", timestamp="10:52"),
            ],
        ),
        Conversation(
            id="CONV-2", customer_name="María Torres", channel=Channel.INSTAGRAM,
            last_message="¿Cuánto cuesta el lavado premium?", unread_count=2,
            messages=[
                Message(id="M-2", sender="user", content="Buenas tardes", timestamp="09:58"),
                Message(id="M-3", sender="user", content="¿Cuánto cuesta el lavado premium?", timestamp="09:59"),
            ],
        ),
        Conversation(
            id="CONV-3", customer_name="Jorge Ramírez", channel=Channel.EMAIL,
            last_message="Consulta por la camioneta DEF-456", unread_count=0,
            messages=[
                Message(id="M-4", sender="user", content="Consulta por la camioneta DEF-456", timestamp="08:30"),
                Message(id="M-5", sender="agent", content="Claro, en un momento le confirmamos.", timestamp="08:34"),
            ],
        ),
    ]
