"""Response packaging: data URLs and ZIP archives."""

from .data_url import bytes_to_data_url
from .zip_archive import archive_file_name, build_zip, sanitize_folder_name

__all__ = ["archive_file_name", "build_zip", "bytes_to_data_url", "sanitize_folder_name"]
