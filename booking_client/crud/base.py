from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from booking_client.utils.api_client import ApiClient
from booking_client.utils.errors import ApiError
from booking_client.utils.helper import unwrap_list, unwrap_object

SchemaType = TypeVar("SchemaType", bound=BaseModel)

BAD_DATA_MESSAGE = "Dữ liệu từ server không hợp lệ. Vui lòng thử lại."


class ResourceCRUD(Generic[SchemaType]):
    """REST resource under `path`, parsed into `schema` at the boundary."""

    def __init__(self, schema: Type[SchemaType], path: str, list_keys: tuple = ("data",)):
        self.schema = schema
        self.path = path.rstrip("/")
        self.list_keys = list_keys

    def parse(self, raw: Any) -> SchemaType:
        try:
            return self.schema.model_validate(raw)
        except ValidationError as exc:
            raise ApiError(BAD_DATA_MESSAGE) from exc

    def parse_many(self, payload: Any) -> List[SchemaType]:
        return [self.parse(raw) for raw in unwrap_list(payload, *self.list_keys)]

    # ---------------- GET ALL ----------------
    def get_all(self, client: ApiClient, sub_path: str = "", params: Optional[Dict[str, Any]] = None) -> List[SchemaType]:
        path = f"{self.path}/{sub_path.strip('/')}" if sub_path else self.path
        return self.parse_many(client.get(path, params=params))

    # ---------------- CREATE ----------------
    def create(self, client: ApiClient, obj_in: Dict[str, Any]) -> SchemaType:
        return self.parse(unwrap_object(client.post(self.path, json=obj_in)))

    # ---------------- UPDATE ----------------
    def update(self, client: ApiClient, id: str, obj_in: Dict[str, Any], sub_path: str = "") -> Any:
        path = f"{self.path}/{id}/{sub_path.strip('/')}" if sub_path else f"{self.path}/{id}"
        return unwrap_object(client.put(path, json=obj_in))
