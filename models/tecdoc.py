from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel
from typing import Any, Dict, List, Optional

# Upstream TecDoc payloads, validated at the gateway boundary.
# Field names are snake_case; the wire uses camelCase.


class TecDocModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        coerce_numbers_to_str=True,
    )

    @field_validator("*", mode="before")
    @classmethod
    def null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        """Upstream sends `null` for empty collections; treat it like an absent field."""
        if value is None:
            field = cls.model_fields[info.field_name]
            if not field.is_required() and field.default is not None:
                return field.get_default(call_default_factory=True)
        return value


class TecDocEnvelope(TecDocModel):
    """Fields every catalog response may carry."""
    status: Optional[int] = None
    status_text: Optional[str] = None


# --- Vehicles ---

class VehicleDetails(TecDocModel):
    engine_code: Optional[str] = None
    engine_codes: List[str] = Field(default_factory=list)
    registration_number: Optional[str] = None
    tec_doc_number: Optional[str] = None
    tec_doc_type: Optional[str] = None


class PlateVehicle(TecDocModel):
    """A vehicle matched by a key-number/plate lookup."""
    car_id: int = Field(..., description="TecDoc linkage target id of the vehicle")
    car_name: Optional[str] = Field(None, description="Manufacturer and model, e.g. 'AUDI E-TRON (GEN) 50 quattro'")
    country: Optional[str] = None
    linking_target_type: Optional[str] = None
    sub_linkage_target_type: Optional[str] = None
    manu_id: Optional[int] = None
    model_id: Optional[int] = None
    vehicle_details: Optional[VehicleDetails] = None


class VehicleArray(TecDocModel):
    array: List[PlateVehicle] = Field(default_factory=list)


class VehiclesByPlateResponse(TecDocEnvelope):
    data: VehicleArray = Field(default_factory=VehicleArray)


class LinkageTargetsResponse(TecDocEnvelope):
    data: Optional[Dict[str, Any]] = None


# --- Articles ---

class ArticleAttribute(TecDocModel):
    attr_name: Optional[str] = None
    attr_value: Optional[str] = None
    display_value: Optional[str] = None
    display_unit: Optional[str] = None


class GenericArticle(TecDocModel):
    generic_article_id: Optional[int] = None
    generic_article_description: Optional[str] = None


class ArticleMisc(TecDocModel):
    article_status_id: Optional[int] = None
    article_status_description: Optional[str] = None
    quantity_per_package: Optional[int] = None
    quantity_per_part_per_package: Optional[int] = None


class ArticleImage(TecDocModel):
    image_url_400: Optional[str] = Field(None, alias="imageURL400")
    image_url_200: Optional[str] = Field(None, alias="imageURL200")
    image_url_100: Optional[str] = Field(None, alias="imageURL100")
    type_description: Optional[str] = None
    sort_number: Optional[int] = None


class ArticleCriterion(TecDocModel):
    criteria_id: Optional[int] = None
    criteria_description: Optional[str] = None
    raw_value: Optional[str] = None
    formatted_value: Optional[str] = None
    criteria_unit_description: Optional[str] = None


class PartsListEntry(TecDocModel):
    article_number: Optional[str] = None
    generic_article_id: Optional[int] = None
    generic_article_description: Optional[str] = None
    quantity: Optional[int] = None
    criteria: List[Any] = Field(default_factory=list)


class OemNumber(TecDocModel):
    article_number: Optional[str] = None
    mfr_name: Optional[str] = None


class Article(TecDocModel):
    """One article as returned by `getArticles`, optionally merged with search details."""
    article_id: Optional[int] = None
    article_number: Optional[str] = None
    brand_name: Optional[str] = None
    mfr_name: Optional[str] = None
    mfr_id: Optional[int] = None
    data_supplier_id: Optional[int] = None
    generic_article_name: Optional[str] = None
    article_status_id: Optional[int] = None
    packing_unit: Optional[int] = None
    quantity_per_packing_unit: Optional[int] = None
    immediate_display_quantity: Optional[int] = None
    immediate_display_price: Optional[float] = None
    thumbnail_name: Optional[str] = None

    # Filled in by detail enrichment
    description: Optional[str] = None
    generic_article_description: Optional[str] = None
    assembly_group: Optional[str] = None
    attributes: Optional[List[ArticleAttribute]] = None

    # Present on full `getArticles` searches
    generic_articles: List[GenericArticle] = Field(default_factory=list)
    article_text: List[Any] = Field(default_factory=list)
    misc: Optional[ArticleMisc] = None
    images: List[ArticleImage] = Field(default_factory=list)
    article_criteria: List[ArticleCriterion] = Field(default_factory=list)
    parts_list: List[PartsListEntry] = Field(default_factory=list)
    oem_numbers: List[OemNumber] = Field(default_factory=list)
    gtins: List[str] = Field(default_factory=list)


class ArticlesResponse(TecDocEnvelope):
    """`getArticles` puts its payload at the top level rather than under `data`."""
    total_matching_articles: Optional[int] = None
    max_allowed_page: Optional[int] = None
    articles: List[Article] = Field(default_factory=list)


class ArticleSearchRow(TecDocModel):
    article_id: Optional[int] = None
    article_number: Optional[str] = None
    brand_name: Optional[str] = None
    mfr_name: Optional[str] = None
    mfr_id: Optional[int] = None
    data_supplier_id: Optional[int] = None
    generic_article_name: Optional[str] = None
    article_name: Optional[str] = None
    generic_article_description: Optional[str] = None
    assembly_group_name: Optional[str] = None
    attributes: List[ArticleAttribute] = Field(default_factory=list)
    images: List[Any] = Field(default_factory=list)
    oem_numbers: List[Any] = Field(default_factory=list)
    usage_numbers: List[Any] = Field(default_factory=list)


class ArticleSearchArray(TecDocModel):
    array: List[ArticleSearchRow] = Field(default_factory=list)


class ArticleSearchResponse(TecDocEnvelope):
    data: ArticleSearchArray = Field(default_factory=ArticleSearchArray)


class ArticleDetails(BaseModel):
    """Detail projection of one article looked up by number and brand."""
    article_id: Optional[int] = None
    article_number: str
    brand_name: str = ""
    mfr_name: str = ""
    mfr_id: int = 0
    data_supplier_id: int = 0
    generic_article_name: str = ""
    description: str = ""
    generic_article_description: str = ""
    assembly_group: str = ""
    attributes: List[ArticleAttribute] = Field(default_factory=list)
    images: List[Any] = Field(default_factory=list)
    oem_numbers: List[Any] = Field(default_factory=list)
    usage_numbers: List[Any] = Field(default_factory=list)


class CompatibleParts(BaseModel):
    """All articles gathered by the pagination walk plus the upstream total."""
    articles: List[Article] = Field(default_factory=list)
    total_matching_articles: int = 0
    pages_fetched: int = 0


# --- Assembly groups ---

class AssemblyGroupNode(TecDocModel):
    assembly_group_node_id: int
    assembly_group_name: Optional[str] = None
    assembly_group_type: Optional[str] = None
    parent_node_id: Optional[int] = None
    children: Optional[int] = None
    has_articles: Optional[bool] = None


class AssemblyGroupArray(TecDocModel):
    array: Optional[List[AssemblyGroupNode]] = None


class AssemblyGroupNodesResponse(TecDocEnvelope):
    data: AssemblyGroupArray = Field(default_factory=AssemblyGroupArray)
