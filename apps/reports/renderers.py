import csv
import io

from rest_framework.renderers import BaseRenderer


class CSVRenderer(BaseRenderer):
    """
    Render a list of rows (lists or tuples) as CSV.

    Selected with ``?format=csv``; the first row is the header.
    """

    media_type = 'text/csv'
    format = 'csv'
    charset = 'utf-8'

    def render(self, data, accepted_media_type=None, renderer_context=None):
        if data is None:
            return b''
        if isinstance(data, dict):
            # Errors (e.g. permission denied) arrive as dicts.
            data = [list(data.keys()), [str(v) for v in data.values()]]

        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerows(data)
        return output.getvalue().encode(self.charset)
