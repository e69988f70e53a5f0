from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict


class ResourceMetadata(BaseModel):
	model_config = ConfigDict(frozen=True)

	type_name: str
	package_name: str
	file_path: str
	slug: str

	@property
	def key(self) -> Tuple[str, str]:
		return (self.package_name, self.type_name)

	@property
	def qualified_name(self) -> str:
		return f"{self.package_name}.{self.type_name}"


class PageMetadata(ResourceMetadata):
	pass


class ConflictType(str, Enum):
	DUPLICATE_NAME = "DuplicateName"
	GENERIC_NAME = "GenericName"
	NAMING_CONVENTION = "NamingConvention"
	PACKAGE_CONFLICT = "PackageConflict"


class Severity(str, Enum):
	ERROR = "error"
	WARNING = "warning"
	INFO = "info"


class Conflict(BaseModel):
	type: ConflictType
	severity: Severity
	message: str
	suggestion: str = ""
	resources: List[ResourceMetadata] = []
	auto_fix: bool = False


class ImportInfo(BaseModel):
	path: str
	alias: str = ""
	needs_alias: bool = False
	package: str
	# Every name the package is bound under in the generated module.
	bindings: List[str] = []


class ResourceInfo(BaseModel):
	reference: str
	source: str
	alias: str = ""
	conflict: bool = False


class PageInfo(ResourceInfo):
	pass


class ScanResult(BaseModel):
	resources: List[ResourceMetadata] = []
	pages: List[PageMetadata] = []
	conflicts: List[Conflict] = []
	page_conflicts: List[Conflict] = []
	success: bool
	message: str
	duration: float = 0.0

	@property
	def all_conflicts(self) -> List[Conflict]:
		return [*self.conflicts, *self.page_conflicts]


class TemplateData(BaseModel):
	timestamp: str
	count: int
	page_count: int = 0
	imports: List[ImportInfo] = []
	page_imports: List[ImportInfo] = []
	resources: List[ResourceInfo] = []
	pages: List[PageInfo] = []
	warnings: List[str] = []
	conflicts: List[Conflict] = []
	generated: datetime


class GenerationResult(BaseModel):
	file_path: str
	bytes_written: int = 0
	success: bool
	message: str
	warnings: List[str] = []
	conflicts: List[Conflict] = []
	duration: float = 0.0
	content: Optional[str] = None
