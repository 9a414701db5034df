from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Any, Dict, List, Optional, Tuple

from models.tecdoc import Article, PlateVehicle

# Outbound shapes of the /tecdoc routes. Serialised with camelCase keys.


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApiResponse(ApiModel):
    success: bool = Field(True, description="False when the request could not be answered")


# --- Vehicles ---

class Manufacturer(ApiModel):
    id: Optional[int] = Field(None, description="TecDoc manufacturer id")
    name: str = Field("", description="Manufacturer name, first word of the car name")


class VehicleType(ApiModel):
    main: Optional[str] = Field(None, description="Linkage target type, e.g. 'P' for passenger car")
    sub: Optional[str] = Field(None, description="Sub linkage target type")


class VehicleSummary(ApiModel):
    """A vehicle resolved from a plate or TecDoc id."""
    id: int = Field(..., description="TecDoc linkage target id")
    name: str = Field("", description="Full car name as reported by TecDoc")
    manufacturer: Manufacturer
    model: Optional[str] = Field(None, description="Car name without the manufacturer")
    type: Optional[VehicleType] = None


class VehicleLookupResponse(ApiResponse):
    vehicle: VehicleSummary


class VehicleDetailsResponse(ApiResponse):
    vehicle: Dict[str, Any] = Field(..., description="Raw linkage target data")


# --- Parts ---

class PartAttribute(ApiModel):
    name: Optional[str] = None
    value: Optional[str] = None
    display_value: Optional[str] = None
    display_unit: Optional[str] = None


class Packaging(ApiModel):
    unit: int = 0
    quantity: int = 0


class Pricing(ApiModel):
    quantity: int = 0
    price: float = 0


class PartSummary(ApiModel):
    """One compatible part as listed to clients."""
    id: int = Field(0, description="Data supplier id")
    article_number: str = ""
    brand: str = Field("", description="Manufacturer name")
    name: str = Field("", description="Generic article name")
    description: str = ""
    generic_article_description: str = ""
    assembly_group: str = ""
    status: int = Field(0, description="Article status id")
    packaging: Packaging = Field(default_factory=Packaging)
    pricing: Pricing = Field(default_factory=Pricing)
    thumbnail: str = ""
    attributes: List[PartAttribute] = Field(default_factory=list)


class PartsResponse(ApiResponse):
    parts: List[PartSummary] = Field(default_factory=list)
    total_matching_parts: int = Field(0, description="Upstream match count, or the part count when unknown")


class PartsByPlateResponse(PartsResponse):
    vehicle: VehicleSummary


# --- Article details ---

class ArticleImageSummary(ApiModel):
    url: str = Field("", description="Largest available image URL")
    type: str = ""
    sort_order: int = 0


class ArticleCriterionSummary(ApiModel):
    id: int = 0
    name: str = ""
    value: str = ""
    formatted_value: str = ""
    unit: str = ""


class PartsListItem(ApiModel):
    article_number: str = ""
    generic_article_id: int = 0
    generic_article_description: str = ""
    quantity: int = 0
    criteria: List[Any] = Field(default_factory=list)


class ArticleSummary(ApiModel):
    """Full description of a single article from a free-text search."""
    id: int = Field(0, description="Data supplier id")
    article_number: str
    brand: str = ""
    mfr_id: int = 0
    name: str = ""
    description: str = Field("", description="Article text lines joined with spaces")
    generic_article_description: str = ""
    status: int = 0
    status_description: str = ""
    packaging: Packaging = Field(default_factory=Packaging)
    images: List[ArticleImageSummary] = Field(default_factory=list)
    criteria: List[ArticleCriterionSummary] = Field(default_factory=list)
    parts_list: List[PartsListItem] = Field(default_factory=list)
    oem_numbers: List[str] = Field(default_factory=list)
    gtin: List[str] = Field(default_factory=list)


class ArticleLookupResponse(ApiResponse):
    article: ArticleSummary
    raw_response: Optional[Dict[str, Any]] = Field(None, description="Upstream payload, only when requested")


# --- Assembly groups ---

class AssemblyGroupTreeNode(ApiModel):
    assembly_group_node_id: int
    assembly_group_name: str = ""
    assembly_group_type: str = "P"
    parent_node_id: Optional[int] = None
    children: Optional[int] = None
    has_articles: Optional[bool] = None
    sub_groups: List["AssemblyGroupTreeNode"] = Field(default_factory=list)


class AssemblyGroupsResponse(ApiResponse):
    assembly_groups: List[AssemblyGroupTreeNode] = Field(default_factory=list)


class CatalogAssemblyGroup(ApiModel):
    """A well-known assembly group that can be offered without asking TecDoc."""
    id: int
    name: str
    parent_id: Optional[int] = None
    has_children: Optional[bool] = None
    description: Optional[str] = None


class CommonAssemblyGroupsResponse(ApiResponse):
    common_groups: List[CatalogAssemblyGroup] = Field(default_factory=list)
    parent_groups: List[CatalogAssemblyGroup] = Field(default_factory=list)
    brake_groups: List[CatalogAssemblyGroup] = Field(default_factory=list)


# --- Projections from upstream records ---

def split_car_name(car_name: str) -> Tuple[str, str]:
    """'AUDI E-TRON (GEN) 50 quattro' -> ('AUDI', 'E-TRON (GEN) 50 quattro')"""
    words = (car_name or "").split(" ")
    return words[0], " ".join(words[1:])


def vehicle_summary(vehicle: PlateVehicle, include_model: bool = True) -> VehicleSummary:
    manufacturer_name, model = split_car_name(vehicle.car_name or "")
    return VehicleSummary(
        id=vehicle.car_id,
        name=vehicle.car_name or "",
        manufacturer=Manufacturer(id=vehicle.manu_id, name=manufacturer_name),
        model=model if include_model else None,
        type=VehicleType(main=vehicle.linking_target_type, sub=vehicle.sub_linkage_target_type) if include_model else None,
    )


def part_summary(article: Article) -> PartSummary:
    return PartSummary(
        id=article.data_supplier_id or 0,
        article_number=article.article_number or "",
        brand=article.mfr_name or "",
        name=article.generic_article_name or "",
        description=article.description or "",
        generic_article_description=article.generic_article_description or "",
        assembly_group=article.assembly_group or "",
        status=article.article_status_id or 0,
        packaging=Packaging(unit=article.packing_unit or 0, quantity=article.quantity_per_packing_unit or 0),
        pricing=Pricing(quantity=article.immediate_display_quantity or 0, price=article.immediate_display_price or 0),
        thumbnail=article.thumbnail_name or "",
        attributes=[
            PartAttribute(
                name=attr.attr_name,
                value=attr.attr_value,
                display_value=attr.display_value,
                display_unit=attr.display_unit,
            )
            for attr in article.attributes or []
        ],
    )


def article_summary(article: Article, requested_number: str) -> ArticleSummary:
    generic = article.generic_articles[0] if article.generic_articles else None
    generic_description = (generic.generic_article_description if generic else None) or ""
    misc = article.misc

    return ArticleSummary(
        id=article.data_supplier_id or 0,
        article_number=article.article_number or requested_number,
        brand=article.mfr_name or "",
        mfr_id=article.mfr_id or 0,
        name=generic_description,
        description=" ".join(str(text) for text in article.article_text),
        generic_article_description=generic_description,
        status=(misc.article_status_id if misc else None) or 0,
        status_description=(misc.article_status_description if misc else None) or "",
        packaging=Packaging(
            unit=(misc.quantity_per_package if misc else None) or 0,
            quantity=(misc.quantity_per_part_per_package if misc else None) or 0,
        ),
        images=[
            ArticleImageSummary(
                url=img.image_url_400 or img.image_url_200 or img.image_url_100 or "",
                type=img.type_description or "",
                sort_order=img.sort_number or 0,
            )
            for img in article.images
        ],
        criteria=[
            ArticleCriterionSummary(
                id=c.criteria_id or 0,
                name=c.criteria_description or "",
                value=c.raw_value or "",
                formatted_value=c.formatted_value or "",
                unit=c.criteria_unit_description or "",
            )
            for c in article.article_criteria
        ],
        parts_list=[
            PartsListItem(
                article_number=p.article_number or "",
                generic_article_id=p.generic_article_id or 0,
                generic_article_description=p.generic_article_description or "",
                quantity=p.quantity or 0,
                criteria=p.criteria,
            )
            for p in article.parts_list
        ],
        oem_numbers=[oem.article_number or "" for oem in article.oem_numbers],
        gtin=article.gtins,
    )
