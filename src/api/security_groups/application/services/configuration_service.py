"""Configuration export/import for the Security Groups context.

A tenant's groups, their settings and their record grants can be exported
as a TenantConfiguration document and imported into any tenant. Imports
create new groups with fresh ids, parents before children.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Mapping

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from security_groups.application.audit_trail import AuditTrail
from security_groups.application.caching import PermissionCacheCoordinator
from security_groups.application.observability import (
    ConfigurationServiceProbe,
    DefaultConfigurationServiceProbe,
)
from security_groups.application.value_objects import (
    CONFIGURATION_FORMAT_VERSION,
    GrantDocument,
    GroupDocument,
    TenantConfiguration,
)
from security_groups.domain.aggregates import (
    AuditAction,
    AuditTargetType,
    RecordAccessGrant,
    SecurityGroup,
)
from security_groups.domain.value_objects import (
    AccessLevel,
    FieldPermissions,
    RecordRef,
    TenantId,
    UserId,
)
from security_groups.ports.exceptions import (
    HierarchyCycleError,
    InvalidConfigurationError,
    SecurityGroupValidationError,
)
from security_groups.ports.repositories import (
    IRecordAccessRepository,
    ISecurityGroupRepository,
)


def order_parents_first(groups: list[GroupDocument]) -> list[GroupDocument]:
    """Order group documents so every parent precedes its children.

    Raises:
        InvalidConfigurationError: If ids repeat or a parent is not in the document
        HierarchyCycleError: If parent references form a cycle
    """
    by_id: dict[str, GroupDocument] = {}
    for doc in groups:
        if doc.id in by_id:
            raise InvalidConfigurationError(f"Duplicate group id in document: {doc.id}")
        by_id[doc.id] = doc

    for doc in groups:
        if doc.parent_id is not None and doc.parent_id not in by_id:
            raise InvalidConfigurationError(
                f"Group {doc.id} references parent {doc.parent_id} "
                f"which is not in the document"
            )

    ordered: list[GroupDocument] = []
    placed: set[str] = set()
    remaining = list(groups)
    while remaining:
        ready = [d for d in remaining if d.parent_id is None or d.parent_id in placed]
        if not ready:
            raise HierarchyCycleError(remaining[0].id, remaining[0].parent_id)
        for doc in ready:
            ordered.append(doc)
            placed.add(doc.id)
        remaining = [d for d in remaining if d.id not in placed]
    return ordered


class ConfigurationService:
    """Exports and imports a tenant's group and grant configuration."""

    def __init__(
        self,
        session: AsyncSession,
        group_repository: ISecurityGroupRepository,
        record_access_repository: IRecordAccessRepository,
        audit_trail: AuditTrail,
        cache: PermissionCacheCoordinator,
        scope_to_tenant: TenantId,
        probe: ConfigurationServiceProbe | None = None,
    ):
        self._session = session
        self._group_repository = group_repository
        self._record_access_repository = record_access_repository
        self._audit = audit_trail
        self._cache = cache
        self._scope_to_tenant = scope_to_tenant
        self._probe = probe or DefaultConfigurationServiceProbe()

    async def export_configuration(self) -> TenantConfiguration:
        """Export every group of the tenant with its settings and grants."""
        groups = await self._group_repository.list_by_tenant(self._scope_to_tenant)
        documents: list[GroupDocument] = []
        grant_count = 0
        for group in sorted(groups, key=lambda g: (g.level, g.sort_order, g.name)):
            grants = await self._record_access_repository.list_for_group(group.id)
            grant_count += len(grants)
            documents.append(
                GroupDocument(
                    id=group.id.value,
                    name=group.name,
                    parent_id=group.parent_id.value if group.parent_id else None,
                    description=group.description,
                    inherit_permissions=group.inherit_permissions,
                    mass_assignment_settings=(
                        group.mass_assignment_settings.to_dict()
                        if group.mass_assignment_settings
                        else None
                    ),
                    record_level_permissions=group.record_level_permissions,
                    active=group.active,
                    sort_order=group.sort_order,
                    grants=[
                        GrantDocument(
                            record_type=grant.record.record_type,
                            record_id=grant.record.record_id,
                            access_level=grant.access_level.value,
                            field_permissions=grant.field_permissions.to_dict(),
                        )
                        for grant in grants
                    ],
                )
            )

        self._probe.configuration_exported(
            tenant_id=self._scope_to_tenant.value,
            group_count=len(documents),
            grant_count=grant_count,
        )
        return TenantConfiguration(
            format_version=CONFIGURATION_FORMAT_VERSION,
            tenant_id=self._scope_to_tenant.value,
            exported_at=datetime.now(UTC),
            groups=documents,
        )

    async def import_configuration(
        self,
        document: TenantConfiguration | Mapping[str, Any],
        acting_user_id: UserId,
    ) -> dict[str, str]:
        """Recreate the groups and grants of ``document`` in the scoped tenant.

        The whole import is one transaction with one audit entry.

        Returns:
            Mapping of document group id to the newly assigned group id

        Raises:
            InvalidConfigurationError: If the document is malformed
            HierarchyCycleError: If the document's parent references loop
        """
        try:
            if not isinstance(document, TenantConfiguration):
                try:
                    document = TenantConfiguration.model_validate(document)
                except ValidationError as e:
                    raise InvalidConfigurationError(
                        f"Invalid configuration document: {e}"
                    ) from e
            if document.format_version != CONFIGURATION_FORMAT_VERSION:
                raise InvalidConfigurationError(
                    f"Unsupported configuration format version: "
                    f"{document.format_version}"
                )
            ordered = order_parents_first(document.groups)

            id_map: dict[str, str] = {}
            created: dict[str, SecurityGroup] = {}
            grant_count = 0
            async with self._session.begin():
                for doc in ordered:
                    group = self._build_group(doc, created.get(doc.parent_id or ""))
                    await self._group_repository.save(group)
                    created[doc.id] = group
                    id_map[doc.id] = group.id.value

                    for grant_doc in doc.grants:
                        await self._record_access_repository.save(
                            self._build_grant(group, grant_doc, acting_user_id)
                        )
                        grant_count += 1

                await self._audit.log_audit(
                    action=AuditAction.CONFIGURATION_IMPORTED,
                    target_type=AuditTargetType.CONFIGURATION,
                    target_id=None,
                    before={},
                    after={
                        "source_tenant_id": document.tenant_id,
                        "format_version": document.format_version,
                        "groups_count": len(id_map),
                        "grants_count": grant_count,
                        "group_ids": id_map,
                    },
                    actor_id=acting_user_id,
                )
        except Exception as e:
            self._probe.configuration_import_failed(
                tenant_id=self._scope_to_tenant.value, error=str(e)
            )
            raise

        await self._cache.invalidate(self._cache.tenant_scope(self._scope_to_tenant))
        self._probe.configuration_imported(
            tenant_id=self._scope_to_tenant.value,
            group_count=len(id_map),
            grant_count=grant_count,
        )
        return id_map

    def _build_group(
        self, doc: GroupDocument, parent: SecurityGroup | None
    ) -> SecurityGroup:
        try:
            return SecurityGroup.create(
                name=doc.name,
                tenant_id=self._scope_to_tenant,
                parent=parent,
                description=doc.description,
                inherit_permissions=doc.inherit_permissions,
                mass_assignment_settings=doc.mass_assignment_settings,
                record_level_permissions=doc.record_level_permissions,
                active=doc.active,
                sort_order=doc.sort_order,
            )
        except SecurityGroupValidationError:
            raise
        except ValueError as e:
            raise InvalidConfigurationError(f"Invalid group {doc.id}: {e}") from e

    def _build_grant(
        self, group: SecurityGroup, doc: GrantDocument, acting_user_id: UserId
    ) -> RecordAccessGrant:
        try:
            return RecordAccessGrant(
                group_id=group.id,
                record=RecordRef(record_type=doc.record_type, record_id=doc.record_id),
                access_level=AccessLevel.parse(doc.access_level),
                field_permissions=FieldPermissions.from_mapping(doc.field_permissions),
                assigned_by=acting_user_id,
            )
        except ValueError as e:
            raise InvalidConfigurationError(
                f"Invalid grant on group {group.name}: {e}"
            ) from e
