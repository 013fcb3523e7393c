from .merge_results import validate_merge_result
from .skill_records import partition_skill_records, validate_skill_record

__all__ = ["validate_merge_result", "partition_skill_records", "validate_skill_record"]
