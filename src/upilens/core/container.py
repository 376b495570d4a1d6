#!/usr/bin/env python3
"""
Export Container Extractor

Opens ZIP exports in memory and pulls out raw text payloads by logical role.
Member paths are matched by suffix or substring so an unknown top-level
prefix directory (e.g. "Takeout/") is tolerated.
"""

import io
import logging
import re
import zipfile
import zlib
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from .errors import DecryptionError, ExtractionError, PasswordRequiredError
from .models import ExportFile, RawPayloads

logger = logging.getLogger(__name__)

XSSI_PREFIX = re.compile(r"^\)\]\}'[\r\n]*")

# Bit 0 of the general purpose flag marks an encrypted member
_ENCRYPTED_FLAG = 0x1


def strip_xssi_prefix(text: str) -> str:
    """
    Remove the anti-JSON-hijacking prefix ``)]}'`` and its trailing line break.

    Example:
        strip_xssi_prefix(")]}'\\n{\\"a\\": 1}") -> '{"a": 1}'
    """
    return XSSI_PREFIX.sub("", text.lstrip("\ufeff"), count=1)


@dataclass(frozen=True)
class RolePath:
    """
    How to locate one logical role inside a container.

    A member matches when it ends with any of ``suffixes``, or when it
    contains ``contains`` and ends with ``extension``.
    """

    role: str
    suffixes: tuple[str, ...] = ()
    contains: str | None = None
    extension: str | None = None
    strip_xssi: bool = False

    def matches(self, member_name: str) -> bool:
        for suffix in self.suffixes:
            if member_name == suffix or member_name.endswith(suffix):
                return True
        if self.contains and self.contains in member_name:
            return self.extension is None or member_name.lower().endswith(self.extension)
        return False


class ZipContainer:
    """
    Read-only view over a ZIP export held in memory.

    Each instance owns its own ZipFile; nothing is shared between
    extractions.
    """

    def __init__(self, zip_ref: zipfile.ZipFile, source_name: str):
        self._zip = zip_ref
        self.source_name = source_name

    @classmethod
    def open(cls, export_file: ExportFile) -> "ZipContainer":
        """
        Open an export file as a ZIP container.

        Raises:
            ExtractionError: If the data is not a readable ZIP archive
        """
        try:
            zip_ref = zipfile.ZipFile(io.BytesIO(export_file.data), "r")
        except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError) as e:
            error_msg = f"Invalid ZIP file: {export_file.name} - {e}"
            logger.error(error_msg)
            raise ExtractionError(error_msg) from e
        return cls(zip_ref, export_file.name)

    def __enter__(self) -> "ZipContainer":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._zip.close()

    @property
    def names(self) -> list[str]:
        """File member names with forward-slash separators, directories excluded."""
        return [info.filename.replace("\\", "/") for info in self._zip.infolist() if not info.is_dir()]

    @property
    def is_encrypted(self) -> bool:
        return any(info.flag_bits & _ENCRYPTED_FLAG for info in self._zip.infolist())

    def find_member(self, predicate: Callable[[str], bool]) -> str | None:
        """Return the first member name satisfying predicate, in archive order."""
        for name in self.names:
            if predicate(name):
                return name
        return None

    def find_role(self, role_path: RolePath) -> str | None:
        return self.find_member(role_path.matches)

    def any_member_contains(self, fragment: str) -> bool:
        return any(fragment in name for name in self.names)

    def read_text(self, member_name: str, password: str | None = None) -> str:
        """
        Read one member as UTF-8 text.

        Raises:
            PasswordRequiredError: Member is encrypted and no password was given
            DecryptionError: The password does not decrypt the member
            ExtractionError: The member is corrupt or unreadable
        """
        info = self._info_for(member_name)
        encrypted = bool(info.flag_bits & _ENCRYPTED_FLAG)
        if encrypted and not password:
            raise PasswordRequiredError(f"{self.source_name} is password protected")

        pwd = password.encode("utf-8") if (encrypted and password) else None
        try:
            raw = self._zip.read(info, pwd=pwd)
        except NotImplementedError as e:
            # AES (method 99) and other methods zipfile cannot decode
            raise ExtractionError(
                f"Unsupported compression or encryption method for {member_name} in {self.source_name}"
            ) from e
        except RuntimeError as e:
            if encrypted:
                raise DecryptionError(f"Incorrect password for {self.source_name}") from e
            raise ExtractionError(f"Failed to read {member_name} from {self.source_name}: {e}") from e
        except (zipfile.BadZipFile, zlib.error, OSError, EOFError) as e:
            if encrypted:
                raise DecryptionError(f"Incorrect password for {self.source_name}") from e
            raise ExtractionError(f"Failed to read {member_name} from {self.source_name}: {e}") from e

        return raw.decode("utf-8-sig", errors="replace")

    def _info_for(self, member_name: str) -> zipfile.ZipInfo:
        for info in self._zip.infolist():
            if info.filename.replace("\\", "/") == member_name:
                return info
        raise ExtractionError(f"Member not found in {self.source_name}: {member_name}")


def extract_roles(
    export_file: ExportFile, role_paths: Iterable[RolePath], password: str | None = None
) -> RawPayloads:
    """
    Extract every role that can be located in a ZIP export.

    Roles that are not found are omitted; the caller decides whether an
    empty result is fatal.

    Args:
        export_file: The uploaded ZIP
        role_paths: Locators for each logical role
        password: Optional password for encrypted archives

    Returns:
        RawPayloads with the located roles populated

    Raises:
        ExtractionError: If the archive cannot be opened or a member cannot be read
        PasswordRequiredError: If a located member is encrypted and no password was given
        DecryptionError: If the password is wrong
    """
    extracted: dict[str, str] = {}

    with ZipContainer.open(export_file) as container:
        logger.debug("Members in %s: %s", export_file.name, container.names)

        for role_path in role_paths:
            member = container.find_role(role_path)
            logger.debug("Role %s -> %s", role_path.role, member)
            if member is None:
                continue

            text = container.read_text(member, password)
            if role_path.strip_xssi:
                text = strip_xssi_prefix(text)
            extracted[role_path.role] = text

    logger.info(
        "Extracted %d role(s) from %s: %s", len(extracted), export_file.name, ", ".join(extracted) or "none"
    )
    return RawPayloads.from_mapping(extracted)
