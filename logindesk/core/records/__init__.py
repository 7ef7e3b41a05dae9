from logindesk.core.records.codec import RecordParseError, decode_record, encode_record

__all__ = ["RecordParseError", "decode_record", "encode_record"]
