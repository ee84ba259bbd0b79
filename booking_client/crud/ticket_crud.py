from booking_client.crud.base import ResourceCRUD
from booking_client.schemas.booking_schema import TicketCreate, TicketOut, TicketPaymentUpdate
from booking_client.utils.api_client import ApiClient

ticket_crud = ResourceCRUD[TicketOut](TicketOut, path="/tickets")


def create(client: ApiClient, obj_in: TicketCreate) -> TicketOut:
    return ticket_crud.create(client, obj_in.to_wire())


def update_payment(client: ApiClient, ticket_id: str, obj_in: TicketPaymentUpdate):
    return ticket_crud.update(client, ticket_id, obj_in.to_wire(), sub_path="payment")
