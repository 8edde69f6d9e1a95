import struct
from datetime import date
from decimal import Decimal

from ..core.record import (Record, SALARY_MAX_COEFFICIENT, SALARY_MAX_SCALE,
                           salary_parts)


class RecordCodec:
    """
    Fixed-width binary layout of a single record slot.

    Storage format (little-endian):
    - 2 bytes: deletion flag (0 = active, 8192 = deleted)
    - 4 bytes: id (int32)
    - 120 bytes: first name, 60 UTF-16-LE code units, space padded
    - 120 bytes: last name, same layout
    - 12 bytes: year, month, day of birth (3 x int32)
    - 2 bytes: workplace number (int16)
    - 16 bytes: salary as a 128-bit decimal
      (96-bit coefficient lo/mid/hi + flags word holding scale and sign)
    - 2 bytes: department, one UTF-16-LE code unit

    Total: 278 bytes per slot

    The codec performs no range checking beyond what ``struct`` enforces;
    names are silently truncated to NAME_LENGTH characters. Callers are
    expected to validate records first. There is no checksum, so decoding a
    misaligned or corrupted slot yields garbage.
    """
    NOT_DELETED = 0
    DELETED = 8192

    NAME_LENGTH = 60
    NAME_SIZE = NAME_LENGTH * 2

    FLAG_FORMAT = '<h'
    ID_FORMAT = '<i'
    DATE_FORMAT = '<iii'
    WORKPLACE_FORMAT = '<h'
    DECIMAL_FORMAT = '<IIII'

    FLAG_SIZE = struct.calcsize(FLAG_FORMAT)
    ID_SIZE = struct.calcsize(ID_FORMAT)
    DATE_SIZE = struct.calcsize(DATE_FORMAT)
    WORKPLACE_SIZE = struct.calcsize(WORKPLACE_FORMAT)
    DECIMAL_SIZE = struct.calcsize(DECIMAL_FORMAT)
    CHAR_SIZE = 2

    RECORD_SIZE = (FLAG_SIZE + ID_SIZE + 2 * NAME_SIZE + DATE_SIZE
                   + WORKPLACE_SIZE + DECIMAL_SIZE + CHAR_SIZE)

    MAX_DECIMAL_SCALE = SALARY_MAX_SCALE
    MAX_DECIMAL_COEFFICIENT = SALARY_MAX_COEFFICIENT

    @classmethod
    def encode(cls, record: Record, deleted: bool = False) -> bytes:
        """
        Serialize a record into exactly RECORD_SIZE bytes.

        Args:
            record: The record to encode
            deleted: Write the deletion flag instead of the active flag

        Returns:
            The encoded slot

        Raises:
            ValueError: If a numeric field does not fit its binary width
        """
        try:
            parts = [
                struct.pack(cls.FLAG_FORMAT, cls.DELETED if deleted else cls.NOT_DELETED),
                struct.pack(cls.ID_FORMAT, record.id),
                cls._encode_name(record.first_name),
                cls._encode_name(record.last_name),
                struct.pack(cls.DATE_FORMAT, record.date_of_birth.year,
                            record.date_of_birth.month, record.date_of_birth.day),
                struct.pack(cls.WORKPLACE_FORMAT, record.workplace_number),
                cls.encode_decimal(record.salary),
                cls._encode_char(record.department),
            ]
        except (struct.error, ValueError) as e:
            raise ValueError(f"Record #{record.id} cannot be encoded: {e}")

        result = b''.join(parts)
        assert len(result) == cls.RECORD_SIZE, \
            f"Expected {cls.RECORD_SIZE} bytes, got {len(result)}"
        return result

    @classmethod
    def decode(cls, data: bytes) -> Record:
        """
        Create a record from a serialized slot (flag included).

        Args:
            data: Must be exactly RECORD_SIZE bytes

        Raises:
            TypeError: If data is not bytes/bytearray
            ValueError: If data has the wrong length or an impossible date
        """
        if not isinstance(data, (bytes, bytearray)):
            raise TypeError(f"Expected bytes or bytearray, got {type(data)}")

        if len(data) != cls.RECORD_SIZE:
            raise ValueError(
                f"Record slot requires exactly {cls.RECORD_SIZE} bytes, got {len(data)}")

        offset = cls.FLAG_SIZE
        record_id = struct.unpack_from(cls.ID_FORMAT, data, offset)[0]
        offset += cls.ID_SIZE

        first_name = cls._decode_name(data[offset:offset + cls.NAME_SIZE])
        offset += cls.NAME_SIZE
        last_name = cls._decode_name(data[offset:offset + cls.NAME_SIZE])
        offset += cls.NAME_SIZE

        year, month, day = struct.unpack_from(cls.DATE_FORMAT, data, offset)
        offset += cls.DATE_SIZE

        workplace_number = struct.unpack_from(cls.WORKPLACE_FORMAT, data, offset)[0]
        offset += cls.WORKPLACE_SIZE

        salary = cls.decode_decimal(data[offset:offset + cls.DECIMAL_SIZE])
        offset += cls.DECIMAL_SIZE

        department = data[offset:offset + cls.CHAR_SIZE].decode('utf-16-le', errors='replace')

        return Record(
            id=record_id,
            first_name=first_name,
            last_name=last_name,
            date_of_birth=date(year, month, day),
            workplace_number=workplace_number,
            salary=salary,
            department=department,
        )

    @classmethod
    def encode_flag(cls, deleted: bool) -> bytes:
        """Return the 2-byte header for an active or deleted slot."""
        return struct.pack(cls.FLAG_FORMAT, cls.DELETED if deleted else cls.NOT_DELETED)

    @classmethod
    def read_header(cls, data: bytes) -> tuple[bool, int]:
        """
        Read the deletion flag and id from the start of a slot.

        Returns:
            (deleted, id) where id is 0 for deleted slots
        """
        flag = struct.unpack_from(cls.FLAG_FORMAT, data, 0)[0]
        if flag != cls.NOT_DELETED:
            return True, 0
        return False, struct.unpack_from(cls.ID_FORMAT, data, cls.FLAG_SIZE)[0]

    @classmethod
    def encode_decimal(cls, value: Decimal) -> bytes:
        """
        Serialize a Decimal to 16 bytes.

        Layout: coefficient low/mid/high 32-bit words, then a flags word
        with the scale (number of fractional digits) in bits 16-23 and the
        sign in bit 31.
        """
        if not isinstance(value, Decimal):
            value = Decimal(value)

        sign, coefficient, scale = salary_parts(value)
        if scale > cls.MAX_DECIMAL_SCALE:
            raise ValueError(f"Decimal scale {scale} > {cls.MAX_DECIMAL_SCALE}")

        if coefficient > cls.MAX_DECIMAL_COEFFICIENT:
            raise ValueError(f"Decimal {value} does not fit in 96 bits")

        lo = coefficient & 0xFFFFFFFF
        mid = (coefficient >> 32) & 0xFFFFFFFF
        hi = (coefficient >> 64) & 0xFFFFFFFF
        flags = (scale << 16) | (0x80000000 if sign else 0)
        return struct.pack(cls.DECIMAL_FORMAT, lo, mid, hi, flags)

    @classmethod
    def decode_decimal(cls, data: bytes) -> Decimal:
        """Deserialize a 16-byte decimal written by ``encode_decimal``."""
        lo, mid, hi, flags = struct.unpack(cls.DECIMAL_FORMAT, data)
        coefficient = lo | (mid << 32) | (hi << 64)
        scale = (flags >> 16) & 0xFF
        value = Decimal(coefficient).scaleb(-scale)
        return -value if flags & 0x80000000 else value

    @classmethod
    def _encode_name(cls, value: str) -> bytes:
        encoded = value[:cls.NAME_LENGTH].encode('utf-16-le')[:cls.NAME_SIZE]
        padding = ' '.encode('utf-16-le') * ((cls.NAME_SIZE - len(encoded)) // 2)
        return encoded + padding

    @classmethod
    def _decode_name(cls, data: bytes) -> str:
        return data.decode('utf-16-le', errors='replace').rstrip()

    @classmethod
    def _encode_char(cls, value: str) -> bytes:
        encoded = (value[:1] or ' ').encode('utf-16-le')[:cls.CHAR_SIZE]
        return encoded.ljust(cls.CHAR_SIZE, b'\x00')
