from __future__ import annotations

from typing import Any

from marshmallow import Schema, fields, pre_dump, validate


class MemberQuerySchema(Schema):
    group_id = fields.Integer(required=True)
    tenant_id = fields.String(required=True, validate=validate.Length(min=1))
    limit = fields.Integer(load_default=5, validate=validate.Range(min=1, max=100))


class MemberSummarySchema(Schema):
    username = fields.String()
    id = fields.Raw()
    permission_groups = fields.List(fields.Raw(), dump_default=list)

    @pre_dump
    def coerce_groups(self, doc: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
        # A scalar group id still matches an equality query on the array field
        groups = doc.get("permission_groups")
        if groups is None:
            groups = []
        elif not isinstance(groups, (list, tuple)):
            groups = [groups]
        return {**doc, "permission_groups": groups}
