"""Remote dataset clients: Census income and HMDA loan records."""
from msa_lending.clients.errors import DataSourceError
from msa_lending.clients.census import CensusIncomeClient
from msa_lending.clients.hmda import HmdaLoanClient

__all__ = ["CensusIncomeClient", "DataSourceError", "HmdaLoanClient"]
