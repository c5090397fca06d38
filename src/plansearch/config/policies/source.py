"""Policy models for the external plan search source."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class SourcePolicy(BaseModel):
    """Connection and navigation defaults for the land titles document search."""

    base_url: str = Field(default="https://tprmb.ca", min_length=1)
    search_page_path: str = Field(default="/lto/jsp/documentSearchServices.jsp", min_length=1)
    search_form_path: str = Field(
        default="/lto/actions/initializeSearchByParishSettlementLot",
        min_length=1,
    )
    submit_field: str = Field(default="searchPlansByParishSettlementLotAction", min_length=1)
    page_size: int = Field(default=10, ge=1)
    request_timeout_seconds: float = Field(default=30.0, ge=1.0)
    user_agent: str = Field(default="plansearch/0.1", min_length=3)
    maintenance_marker: str = Field(default="scheduled maintenance", min_length=1)
    verify_tls: bool = Field(default=True)

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        stripped = value.strip().rstrip("/")
        if not stripped.startswith(("http://", "https://")):
            raise ValueError("base_url must use http or https scheme")
        return stripped
