import xml.etree.ElementTree as ET
from typing import Iterable, TextIO

from ..core.exceptions import ImportFormatError
from ..core.record import Record, format_date, format_salary, parse_date, parse_salary

XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>'


class RecordXmlWriter:
    """
    Writes records as an indented XML document::

        <records>
          <record id="1">
            <name first="John" last="Smith" />
            <dateOfBirth>05/18/1986</dateOfBirth>
            <workPlaceNumber>12</workPlaceNumber>
            <salary>1500.00</salary>
            <department>A</department>
          </record>
        </records>
    """

    def __init__(self, writer: TextIO):
        if writer is None:
            raise TypeError("Writer cannot be None")
        self._writer = writer

    def write(self, records: Iterable[Record]) -> int:
        if records is None:
            raise TypeError("Records cannot be None")

        root = ET.Element("records")
        count = 0
        for record in records:
            root.append(self.to_element(record))
            count += 1

        ET.indent(root, space="  ")
        self._writer.write(XML_DECLARATION + "\n")
        self._writer.write(ET.tostring(root, encoding="unicode"))
        self._writer.write("\n")
        return count

    @staticmethod
    def to_element(record: Record) -> ET.Element:
        element = ET.Element("record", id=str(record.id))
        ET.SubElement(element, "name", first=record.first_name, last=record.last_name)
        ET.SubElement(element, "dateOfBirth").text = format_date(record.date_of_birth)
        ET.SubElement(element, "workPlaceNumber").text = str(record.workplace_number)
        ET.SubElement(element, "salary").text = format_salary(record.salary)
        ET.SubElement(element, "department").text = record.department
        return element


class RecordXmlReader:
    """Reads documents produced by RecordXmlWriter from a path or a file object."""

    def __init__(self, source):
        if source is None:
            raise TypeError("Source cannot be None")
        self._source = source

    def read_all(self) -> list[Record]:
        """
        Parse every ``<record>`` element under the root.

        Raises:
            ImportFormatError: If the document is not well-formed or a
                               record is missing a field
        """
        try:
            root = ET.parse(self._source).getroot()
        except ET.ParseError as e:
            raise ImportFormatError(f"Malformed XML document: {e}")

        if root.tag != "records":
            raise ImportFormatError(f"Unexpected root element <{root.tag}>, expected <records>")

        return [self._parse_record(element, index)
                for index, element in enumerate(root.findall("record"), start=1)]

    @staticmethod
    def _parse_record(element: ET.Element, position: int) -> Record:
        name = element.find("name")
        if name is None:
            raise ImportFormatError(f"Record {position}: missing <name> element")

        try:
            department = RecordXmlReader._text(element, "department", position)
            if len(department) != 1:
                raise ValueError(f"department must be a single character, got {department!r}")

            return Record(
                id=int(element.get("id", "")),
                first_name=name.get("first", ""),
                last_name=name.get("last", ""),
                date_of_birth=parse_date(RecordXmlReader._text(element, "dateOfBirth", position)),
                workplace_number=int(RecordXmlReader._text(element, "workPlaceNumber", position)),
                salary=parse_salary(RecordXmlReader._text(element, "salary", position)),
                department=department,
            )
        except ValueError as e:
            raise ImportFormatError(f"Record {position}: {e}")

    @staticmethod
    def _text(element: ET.Element, tag: str, position: int) -> str:
        child = element.find(tag)
        if child is None or child.text is None:
            raise ImportFormatError(f"Record {position}: missing <{tag}> element")
        return child.text.strip()
