from __future__ import annotations

from .lookup import find_group_by_name, find_service_by_name, first_navigable_service
from .merge import build_forest, clean_groups, merge_groups
from .models import MAX_GROUP_DEPTH, GroupRecord, ServiceMatch, ServiceRecord
