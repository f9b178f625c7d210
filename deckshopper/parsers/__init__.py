from deckshopper.parsers.collection_csv import parse_collection_csv
from deckshopper.parsers.deck_text import parse_deck_line, parse_text_deck_list
from deckshopper.parsers.export import export_collection_csv, export_missing_text
from deckshopper.parsers.file_types import FileType, detect_file_type, validate_upload
from deckshopper.parsers.ydk import build_ydk_deck, parse_ydk

__all__ = [
    "FileType",
    "build_ydk_deck",
    "detect_file_type",
    "export_collection_csv",
    "export_missing_text",
    "parse_collection_csv",
    "parse_deck_line",
    "parse_text_deck_list",
    "parse_ydk",
    "validate_upload",
]
