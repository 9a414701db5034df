from functools import cmp_to_key
from typing import Any, Dict, List, Tuple

from models.parts_lookup import AssemblyGroupTreeNode
from models.tecdoc import Article, ArticleDetails, AssemblyGroupNode

DEFAULT_ASSEMBLY_GROUP_TYPE = "P"

# Detail fields copied onto an article when the lookup returned something for them
_MERGED_DETAIL_FIELDS = (
    "article_id",
    "brand_name",
    "mfr_name",
    "mfr_id",
    "data_supplier_id",
    "generic_article_name",
    "description",
    "generic_article_description",
    "assembly_group",
    "attributes",
)


def _collation_key(text: str) -> Tuple[str, str]:
    """Letters compare case-insensitively first; on a tie lowercase goes ahead of uppercase."""
    return text.casefold(), text.swapcase()


def _compare(left: str, right: str) -> int:
    left_key, right_key = _collation_key(left), _collation_key(right)
    return (left_key > right_key) - (left_key < right_key)


def _display_order(a: Article, b: Article) -> int:
    # Brand only counts when both sides have one
    if a.mfr_name and b.mfr_name:
        by_brand = _compare(a.mfr_name, b.mfr_name)
        if by_brand:
            return by_brand
    return _compare(a.article_number or "", b.article_number or "")


def sort_for_display(articles: List[Article]) -> List[Article]:
    """Orders articles by manufacturer name, then article number, the way a UI collator would."""
    return sorted(articles, key=cmp_to_key(_display_order))


def merge_article_details(article: Article, details: ArticleDetails) -> Article:
    """Returns a copy of `article` with every non-empty detail field laid over it."""
    update: Dict[str, Any] = {}
    for field in _MERGED_DETAIL_FIELDS:
        value = getattr(details, field)
        if value:
            update[field] = value
    return article.model_copy(update=update)


def article_from_details(details: ArticleDetails) -> Article:
    """Lifts a detail lookup into an article record so it can be listed like one."""
    return merge_article_details(Article(article_number=details.article_number), details)


def build_assembly_group_tree(nodes: List[AssemblyGroupNode]) -> List[AssemblyGroupTreeNode]:
    """
    Folds the flat node list into a forest using `parent_node_id`.

    Nodes whose parent is missing from the list become roots. Input order is
    kept among siblings and among roots.
    """
    by_id: Dict[int, AssemblyGroupTreeNode] = {}
    for node in nodes:
        by_id[node.assembly_group_node_id] = AssemblyGroupTreeNode(
            assembly_group_node_id=node.assembly_group_node_id,
            assembly_group_name=node.assembly_group_name or "",
            assembly_group_type=node.assembly_group_type or DEFAULT_ASSEMBLY_GROUP_TYPE,
            parent_node_id=node.parent_node_id,
            children=node.children,
            has_articles=node.has_articles,
        )

    roots: List[AssemblyGroupTreeNode] = []
    for node in nodes:
        tree_node = by_id[node.assembly_group_node_id]
        parent = by_id.get(node.parent_node_id) if node.parent_node_id else None
        if parent is not None and parent is not tree_node:
            parent.sub_groups.append(tree_node)
        else:
            roots.append(tree_node)
    return roots
