from signoff.schemas.registry import SchemaRegistry, get_registry
from signoff.schemas.validator import RecordInvalid, check_record, record_problems

__all__ = ["RecordInvalid", "SchemaRegistry", "check_record", "get_registry", "record_problems"]
