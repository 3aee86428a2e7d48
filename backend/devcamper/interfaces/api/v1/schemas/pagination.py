from typing import Any

from pydantic import BaseModel, SerializerFunctionWrapHandler, model_serializer


class PageLink(BaseModel):
    page: int
    limit: int


class PaginationMeta(BaseModel):
    page: int
    limit: int
    start_index: int
    end_index: int
    next: PageLink | None = None
    previous: PageLink | None = None

    @model_serializer(mode="wrap")
    def omit_missing_links(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        # A link that does not apply is left out of the payload, not sent as null.
        return {key: value for key, value in handler(self).items() if value is not None}


class ListingResponse(BaseModel):
    success: bool = True
    count: int
    pagination: PaginationMeta
    data: list[dict[str, Any]]
