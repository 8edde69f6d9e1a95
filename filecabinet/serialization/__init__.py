"""
CSV and XML readers and writers used by export, import and the generator.
"""

from .csv_io import RecordCsvReader, RecordCsvWriter, CSV_HEADER
from .xml_io import RecordXmlReader, RecordXmlWriter

__all__ = ['RecordCsvReader', 'RecordCsvWriter', 'RecordXmlReader',
           'RecordXmlWriter', 'CSV_HEADER']
