from .csv_export import merge_output_filename, merge_records_to_csv, skills_to_csv, write_csv
from .enrich import SKILL_CSV_HEADER, EnrichedSkillRow, enrich, enrich_record

__all__ = [
    "SKILL_CSV_HEADER",
    "EnrichedSkillRow",
    "enrich",
    "enrich_record",
    "merge_output_filename",
    "merge_records_to_csv",
    "skills_to_csv",
    "write_csv",
]
