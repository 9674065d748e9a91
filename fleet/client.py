"""Client class for the companies trucks are leased to."""

from typing import List, Optional


class Client:
    """A customer company and the sites its trucks are allocated to."""

    def __init__(
        self,
        id: str,
        name: str,
        contact_person: str,
        phone: str,
        allocations: Optional[List[str]] = None,
    ):
        self.id = id
        self.name = name
        self.contact_person = contact_person
        self.phone = phone
        self.allocations = allocations or []
