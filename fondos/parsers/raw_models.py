# fondos/parsers/raw_models.py
from typing import Any, ClassVar, List

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from fondos.domain.enums import ReportSection
from fondos.domain.errors import FormatError
from fondos.utils.row_context import RowContext
from .line_source import ScannedRow


class RawReportRow(BaseModel):
    """
    A table line with its cells bound to named fields. Cells stay strings here;
    the record factory turns them into cents, dates and percentages.
    Column aliases are the titles the bank portal prints above each table.
    """
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    SECTION: ClassVar[ReportSection]

    line_number: int
    raw_line: str

    @field_validator('*', mode='before')
    @classmethod
    def strip_cell(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip(" \r\n")
        return v

    @classmethod
    def column_titles(cls) -> List[str]:
        return [f.alias for f in cls.model_fields.values() if f.alias]

    @classmethod
    def from_scanned(cls, row: ScannedRow) -> "RawReportRow":
        context = RowContext(section=cls.SECTION.value, line_number=row.line_number, raw_line=row.raw_line)
        titles = cls.column_titles()
        if len(row.fields) < len(titles):
            raise FormatError(
                f"Expected {len(titles)} tab-separated columns ({', '.join(titles)}), found {len(row.fields)}",
                context=context,
            )
        values = dict(zip(titles, row.fields))
        try:
            return cls(line_number=row.line_number, raw_line=row.raw_line, **values)
        except ValidationError as e:
            raise FormatError(f"Row does not match the {cls.SECTION.value} layout: {e.errors()}", context=context) from e

    def context(self) -> RowContext:
        return RowContext(section=self.SECTION.value, line_number=self.line_number, raw_line=self.raw_line)


class RawBalanceRow(RawReportRow):
    SECTION: ClassVar[ReportSection] = ReportSection.ACCOUNT_STATUS

    fund: str = Field(alias="Fondo")
    balance: str = Field(alias="Saldo")


class RawMovementRow(RawReportRow):
    SECTION: ClassVar[ReportSection] = ReportSection.MOVEMENTS

    date: str = Field(alias="Fecha")
    fund: str = Field(alias="Nombre del multiportafolio")
    movement: str = Field(alias="Movimiento")
    contribution_type: str = Field(alias="Tipo Aporte")  # not used by the ledger
    value: str = Field(alias="Valor")


class RawYearlyReturnRow(RawReportRow):
    SECTION: ClassVar[ReportSection] = ReportSection.FUND_RETURNS_YEARLY

    fund: str = Field(alias="Fondo")
    date: str = Field(alias="Fecha de cierre")
    fund_value: str = Field(alias="Valor del fondo")
    unit_value: str = Field(alias="Valor de la unidad")
    roe_next_to_last_year: str = Field(alias="Rentabilidad penúltimo año")
    roe_last_year: str = Field(alias="Rentabilidad último año")
    roe_year_to_date: str = Field(alias="Rentabilidad año corrido")


class RawPeriodicReturnRow(RawReportRow):
    SECTION: ClassVar[ReportSection] = ReportSection.FUND_RETURNS_PERIODIC

    fund: str = Field(alias="Fondo")
    roe_day: str = Field(alias="Último día")
    roe_day_annualized: str = Field(alias="Último día E.A.")
    roe_month: str = Field(alias="Último mes")
    roe_trimester: str = Field(alias="Último trimestre")
    roe_semester: str = Field(alias="Último semestre")
    roe_year: str = Field(alias="Último año")
    roe_two_years: str = Field(alias="Últimos dos años")
    roe_total: str = Field(alias="Desde el inicio")
