import os

ALLOWED_EXTENSIONS = ('.csv', '.tsv')


class DataValidator:
    def __init__(self, max_file_size_mb: int = 50):
        self.max_file_size_mb = max_file_size_mb

    def validate(self, filename: str, size_bytes: int) -> dict:
        if not filename:
            return {'valid': False, 'error': 'No file selected.'}

        size_mb = size_bytes / (1024 * 1024)
        if size_mb > self.max_file_size_mb:
            return {'valid': False, 'error': f'File too large ({size_mb:.1f} MB). Max is {self.max_file_size_mb} MB.'}

        if os.path.splitext(filename)[1].lower() not in ALLOWED_EXTENSIONS:
            return {'valid': False, 'error': 'Only CSV and TSV files are supported.'}

        return {'valid': True}
