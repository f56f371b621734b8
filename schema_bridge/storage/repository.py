"""
Mapping Repository - Owns the collection of named mapping configurations.

Features:
- Create/update with createdAt/updatedAt timestamps
- snake_case and camelCase correspondence keys normalized on save and import
- Structural validation before anything enters the store
- Lookup by id and by endpoint
- Bulk export/import as a single JSON document
- Keeps serving from memory when the underlying store cannot be written
"""

import copy
import errno
import json
import logging
import threading
from dataclasses import dataclass, field as dataclass_field
from typing import Any, Callable, Dict, List, Optional, Union

from schema_bridge.exceptions import MappingValidationError, StoreError
from schema_bridge.mapper.mapping import MappingConfiguration, now_iso
from .stores import MappingStore

logger = logging.getLogger(__name__)

ConfigurationLike = Union[MappingConfiguration, Dict[str, Any]]

READ_ONLY_ERRNOS = {errno.EROFS, errno.EACCES, errno.EPERM}


@dataclass
class SaveResult:
    """Saved configuration plus any non-fatal persistence warnings"""
    configuration: MappingConfiguration
    persisted: bool = True
    warnings: List[str] = dataclass_field(default_factory=list)


@dataclass
class DeleteResult:
    """Whether a configuration was removed, plus persistence warnings"""
    deleted: bool
    persisted: bool = True
    warnings: List[str] = dataclass_field(default_factory=list)


@dataclass
class ImportResult:
    """Outcome of a bulk import"""
    imported_count: int = 0
    errors: List[str] = dataclass_field(default_factory=list)
    warnings: List[str] = dataclass_field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "importedCount": self.imported_count,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }


@dataclass
class MappingSummary:
    """Listing entry for a stored configuration"""
    id: str
    name: str
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {"id": self.id, "name": self.name}
        if self.description:
            result["description"] = self.description
        return result


class MappingRepository:
    """
    Durable collection of mapping configurations

    Usage:
    ```python
    repository = MappingRepository(JsonFileStore(Path("mappings.json")))
    repository.save({"id": "crm-to-erp", "name": "CRM → ERP", ...})
    config = repository.get("crm-to-erp")
    ```

    The store is read lazily on first access. Each load-mutate-save sequence
    runs under the repository lock.
    """

    def __init__(self, store: MappingStore, clock: Callable[[], str] = now_iso):
        """
        Initialize repository

        Args:
            store: Backing store for the {id: configuration} document
            clock: Source of ISO-8601 timestamps
        """
        self.store = store
        self._clock = clock
        self._lock = threading.RLock()
        self._mappings: Dict[str, MappingConfiguration] = {}
        self._initialized = False
        self._unwritable: Optional[str] = None
        self.load_warnings: List[str] = []

    # ------------------------------------------------------------------
    # Loading and persistence
    # ------------------------------------------------------------------

    def _ensure_loaded(self) -> None:
        if self._initialized:
            return
        self._initialized = True
        self._mappings = {}

        try:
            document = self.store.load()
        except StoreError as e:
            self._unwritable = "stored mappings could not be loaded"
            self._warn_load(f"Could not load mappings, using in-memory storage: {e}")
            return

        for mapping_id, raw in (document or {}).items():
            try:
                self._mappings[mapping_id] = self._admit(raw)
            except MappingValidationError as e:
                self._unwritable = "some stored mappings could not be loaded"
                self._warn_load(f"Skipping stored mapping '{mapping_id}': {e}")

    def _warn_load(self, message: str) -> None:
        logger.warning(message)
        self.load_warnings.append(message)

    def _document(self) -> Dict[str, Any]:
        return {mapping_id: cfg.to_dict() for mapping_id, cfg in self._mappings.items()}

    def _persist(self) -> List[str]:
        """
        Write the whole collection; failures become warnings

        Nothing is written once the store turned out read-only or its image
        could not be fully loaded, so unread entries are never overwritten.
        """
        if self._unwritable:
            message = f"Mappings stored in memory only: {self._unwritable}"
            logger.info(message)
            return [message]

        try:
            self.store.save(self._document())
        except Exception as e:
            if isinstance(e, OSError) and e.errno in READ_ONLY_ERRNOS:
                self._unwritable = f"store is read-only ({e})"
                message = f"Mappings stored in memory only: {self._unwritable}"
            else:
                message = f"Could not save mappings to store: {e}"
            logger.warning(message)
            return [message]

        return []

    def clear_cache(self) -> None:
        """Drop the in-memory image; the next access reloads from the store"""
        with self._lock:
            self._mappings = {}
            self._initialized = False
            self._unwritable = None
            self.load_warnings = []

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    @staticmethod
    def _admit(configuration: ConfigurationLike) -> MappingConfiguration:
        """
        Normalize and structurally validate a configuration

        Raises:
            MappingValidationError: If the configuration may not enter the store
        """
        if isinstance(configuration, MappingConfiguration):
            parsed = copy.deepcopy(configuration)
        else:
            parsed = MappingConfiguration.from_dict(configuration)

        errors = parsed.structural_errors()
        if errors:
            mapping_id = parsed.id if isinstance(parsed.id, str) else None
            raise MappingValidationError(errors, mapping_id)
        return parsed

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def save(self, configuration: ConfigurationLike) -> SaveResult:
        """
        Create or fully replace a configuration

        createdAt is set on first save and preserved afterwards; updatedAt is
        refreshed every time. Persistence failures are reported in the result
        and never fail the save itself.

        Raises:
            MappingValidationError: If the configuration is structurally invalid
        """
        with self._lock:
            self._ensure_loaded()
            parsed = self._admit(configuration)

            now = self._clock()
            existing = self._mappings.get(parsed.id)
            parsed.created_at = existing.created_at if existing and existing.created_at else now
            parsed.updated_at = now

            self._mappings[parsed.id] = parsed
            warnings = self._persist()

            logger.info(f"Saved mapping '{parsed.id}' ({len(parsed.field_mappings)} fields)")
            return SaveResult(copy.deepcopy(parsed), persisted=not warnings, warnings=warnings)

    def get(self, mapping_id: str) -> Optional[MappingConfiguration]:
        """Return a copy of a stored configuration, or None"""
        with self._lock:
            self._ensure_loaded()
            found = self._mappings.get(mapping_id)
            return copy.deepcopy(found) if found else None

    def delete(self, mapping_id: str) -> DeleteResult:
        """Remove a configuration; deleted is False if it did not exist"""
        with self._lock:
            self._ensure_loaded()
            if mapping_id not in self._mappings:
                return DeleteResult(deleted=False)
            del self._mappings[mapping_id]
            warnings = self._persist()
            logger.info(f"Deleted mapping '{mapping_id}'")
            return DeleteResult(deleted=True, persisted=not warnings, warnings=warnings)

    def list(self) -> List[MappingSummary]:
        """Summaries of all stored configurations, in insertion order"""
        with self._lock:
            self._ensure_loaded()
            return [
                MappingSummary(id=cfg.id, name=cfg.name, description=cfg.description)
                for cfg in self._mappings.values()
            ]

    def find_by_endpoint(self, system: str, path: str, method: Optional[str] = None) -> List[MappingConfiguration]:
        """Configurations whose source or target endpoint matches"""
        with self._lock:
            self._ensure_loaded()
            return [
                copy.deepcopy(cfg)
                for cfg in self._mappings.values()
                if cfg.source_endpoint.matches(system, path, method)
                or cfg.target_endpoint.matches(system, path, method)
            ]

    def export_all(self) -> str:
        """Serialize every stored configuration as one JSON document"""
        with self._lock:
            self._ensure_loaded()
            return json.dumps(self._document(), indent=2)

    def import_all(self, serialized: Union[str, Dict[str, Any]]) -> ImportResult:
        """
        Import a serialized {id: configuration} collection

        Invalid entries are counted as errors; the remaining entries still
        import. Timestamps present in the document are kept.
        """
        if isinstance(serialized, str):
            try:
                data = json.loads(serialized)
            except json.JSONDecodeError as e:
                return ImportResult(errors=[f"Failed to parse JSON: {e}"])
        else:
            data = serialized

        if not isinstance(data, dict):
            return ImportResult(errors=["Invalid JSON format: expected an object keyed by mapping id"])

        result = ImportResult()
        with self._lock:
            self._ensure_loaded()
            now = self._clock()

            for key, raw in data.items():
                try:
                    parsed = self._admit(raw)
                except MappingValidationError as e:
                    result.errors.append(f"Invalid mapping structure for ID '{key}': {'; '.join(e.errors)}")
                    continue
                except (AttributeError, KeyError, TypeError, ValueError) as e:
                    logger.warning(f"Unexpected mapping shape for ID '{key}': {e!r}")
                    result.errors.append(f"Invalid mapping structure for ID '{key}': {e}")
                    continue

                parsed.created_at = parsed.created_at or now
                parsed.updated_at = parsed.updated_at or now
                self._mappings[parsed.id] = parsed
                result.imported_count += 1

            if result.imported_count:
                result.warnings.extend(self._persist())

        logger.info(f"Imported {result.imported_count} mappings, {len(result.errors)} rejected")
        return result
