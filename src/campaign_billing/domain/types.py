"""Domain enumerations and shared vocabulary for campaign billing."""

from enum import StrEnum
from typing import Final, Literal


class BuyMetric(StrEnum):
    """Unit basis a campaign is bought on."""

    CPM = "CPM"
    CPC = "CPC"
    CPA = "CPA"
    CPCV = "CPCV"
    FLAT_FEE = "Flat Fee/Units"


class InputKind(StrEnum):
    """Control kind of a configurable model input."""

    NUMBER = "number"
    SELECT = "select"
    BOOLEAN = "boolean"


class OutputName(StrEnum):
    """Output keys shared by every pricing model."""

    TARGET_DELIVERY = "targetDelivery"
    ACTUAL_DELIVERY = "actualDelivery"
    CLIENT_SPEND = "clientSpend"
    MEDIA_SPEND = "mediaSpend"
    NET_BUDGET = "netBudget"
    TO_DATE_BUDGET = "toDateBudget"
    INVOICE_AMOUNT = "invoiceAmount"
    SERVICE_FEE_AMOUNT = "serviceFeeAmount"


class ModelId(StrEnum):
    """Stable identifiers of the registered pricing models."""

    FIXED_METRIC = "FixedMetric"
    HD_GROSS_INVOICE_GROSS_FEE = "HdGrossInvoiceGrossFee"
    HD_NET_INVOICE_GROSS_FEE = "HdNetInvoiceGrossFee"
    HD_NET_INVOICE_NET_FEE = "HdNetInvoiceNetFee"
    JOB_SERVICE = "JobService"
    MANAGED_SERVICE = "ManagedService"
    MEDIA_SERVICE = "MediaService"
    NO_FEE_SERVICE = "NoFeeService"
    PROJECT_SERVICE = "ProjectService"


NotApplicable = Literal["N/A"]

# Marker returned when a calculation is undefined for the current inputs
NOT_APPLICABLE: Final[NotApplicable] = "N/A"
