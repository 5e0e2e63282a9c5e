"""Table descriptions for subject-owned resource kinds.

Resource tables belong to other parts of the product (projects, sites,
marketplace, file storage); only the columns that decide access are
described here, using lightweight SQLAlchemy Core constructs rather than
ORM models.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from sqlalchemy import ColumnClause, TableClause, column, table

from iam.domain.value_objects import ResourceKind


@dataclass(frozen=True)
class ResourceTableSpec:
    """Where a resource kind lives and which columns carry ownership.

    Attributes:
        table: Core table clause with every column used below
        owner_columns: Columns naming the owner, first non-null wins
        organization_column: Column scoping the resource to a tenant
        title_column: Column with a human-readable name
    """

    table: TableClause
    owner_columns: tuple[str, ...]
    organization_column: str = "organization_id"
    title_column: str | None = None

    @property
    def id_column(self) -> ColumnClause:
        return self.table.c.id

    def selected_columns(self) -> list[ColumnClause]:
        names = ["id", *self.owner_columns, self.organization_column]
        if self.title_column:
            names.append(self.title_column)
        return [self.table.c[name] for name in names]


def _spec(
    name: str,
    owner_columns: tuple[str, ...],
    title_column: str | None,
) -> ResourceTableSpec:
    column_names = ["id", *owner_columns, "organization_id"]
    if title_column:
        column_names.append(title_column)
    return ResourceTableSpec(
        table=table(name, *(column(c) for c in column_names)),
        owner_columns=owner_columns,
        title_column=title_column,
    )


RESOURCE_TABLES: Mapping[ResourceKind, ResourceTableSpec] = MappingProxyType(
    {
        ResourceKind.PROJECT: _spec(
            "projects", ("owner_user_id", "user_id", "owner_id"), "title"
        ),
        ResourceKind.SITE: _spec("aethex_sites", ("owner_id",), "name"),
        ResourceKind.LISTING: _spec("marketplace_listings", ("seller_id",), "title"),
        ResourceKind.FILE: _spec("files", ("user_id",), "name"),
    }
)
