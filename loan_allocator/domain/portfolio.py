"""Wire reference records into banks, facilities and their covenants"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from loan_allocator.domain.exceptions import ReferenceDataError
from loan_allocator.domain.models import Bank, Covenant, Covenantable, Facility


@dataclass
class Portfolio:
    """Banks by id, facilities in load order and by id"""

    banks: Dict[int, Bank] = field(default_factory=dict)
    facilities: List[Facility] = field(default_factory=list)
    facilities_by_id: Dict[int, Facility] = field(default_factory=dict, repr=False)

    def facility(self, facility_id: int) -> Facility:
        return self.facilities_by_id[facility_id]


def build_portfolio(banks: Iterable, facilities: Iterable, covenants: Iterable) -> Portfolio:
    """
    Build the portfolio from bank, facility and covenant records.

    Records only need the attributes of the matching dataset rows
    (see infrastructure.datasets.records). A covenant goes to its facility
    when facility_id resolves, otherwise to its bank.

    Raises:
        ReferenceDataError: duplicate ids, unknown bank, or a covenant
            that resolves to neither a facility nor a bank
    """
    portfolio = Portfolio()

    for record in banks:
        if record.id in portfolio.banks:
            raise ReferenceDataError(f"Duplicate bank id {record.id}")
        portfolio.banks[record.id] = Bank(id=record.id, name=record.name)

    facilities_by_id = portfolio.facilities_by_id
    for record in facilities:
        if record.id in facilities_by_id:
            raise ReferenceDataError(f"Duplicate facility id {record.id}")
        bank = portfolio.banks.get(record.bank_id)
        if bank is None:
            raise ReferenceDataError(f"Facility {record.id} references unknown bank {record.bank_id}")

        facility = Facility(
            id=record.id,
            capacity=record.amount,
            interest_rate=record.interest_rate,
            bank=bank,
        )
        facilities_by_id[facility.id] = facility
        portfolio.facilities.append(facility)

    for record in covenants:
        covenant = Covenant(
            bank_id=record.bank_id,
            facility_id=record.facility_id,
            max_default_likelihood=record.max_default_likelihood,
            banned_state=record.banned_state,
        )
        target: Covenantable
        if covenant.facility_id is not None and covenant.facility_id in facilities_by_id:
            target = facilities_by_id[covenant.facility_id]
        elif covenant.facility_id is None and covenant.bank_id in portfolio.banks:
            target = portfolio.banks[covenant.bank_id]
        else:
            raise ReferenceDataError(
                f"Covenant (bank_id={covenant.bank_id}, facility_id={covenant.facility_id}) "
                "does not resolve to a facility or bank"
            )
        target.add_covenant(covenant)

    return portfolio
