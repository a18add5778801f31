"""Person (UserInfo) records of access control terminals."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import logging
from typing import Any

from ..client import ISAPIClient
from ..models import Person
from ..utils import as_list, deep_get

Node = dict[str, Any]

_LOGGER = logging.getLogger(__name__)

ENDPOINT_RECORD = "AccessControl/UserInfo/Record"
ENDPOINT_MODIFY = "AccessControl/UserInfo/Modify"
ENDPOINT_DELETE = "AccessControl/UserInfo/Delete"
ENDPOINT_SEARCH = "AccessControl/UserInfo/Search"
ENDPOINT_COUNT = "AccessControl/UserInfo/Count"


class PersonService:
    """Add, update, remove and search persons."""

    def __init__(self, client: ISAPIClient) -> None:
        """Initialize."""
        self.client = client

    @staticmethod
    def _payload(person: Person | Mapping[str, Any]) -> Node:
        if isinstance(person, Person):
            return person.to_dict()
        return dict(person)

    def add(self, person: Person | Mapping[str, Any]) -> Node:
        return self.client.post(ENDPOINT_RECORD, self._payload(person))

    def modify(self, person: Person | Mapping[str, Any]) -> Node:
        return self.client.put(ENDPOINT_MODIFY, self._payload(person))

    def delete(self, employee_nos: Iterable[str]) -> Node:
        data = {
            "UserInfoDelCond": {
                "EmployeeNoList": [{"employeeNo": str(employee_no)} for employee_no in employee_nos],
            }
        }
        return self.client.put(ENDPOINT_DELETE, data)

    def search(
        self,
        page: int = 0,
        max_results: int = 30,
        employee_nos: Iterable[str] = (),
        search_id: str = "1",
    ) -> list[Person]:
        """Search persons, `page` starts at 0."""
        condition: Node = {
            "searchID": search_id,
            "searchResultPosition": page * max_results,
            "maxResults": max_results,
        }
        if employee_nos := list(employee_nos):
            condition["EmployeeNoList"] = [{"employeeNo": str(employee_no)} for employee_no in employee_nos]

        response = self.client.post(ENDPOINT_SEARCH, {"UserInfoSearchCond": condition})
        users = as_list(deep_get(response, "UserInfoSearch.UserInfo"))
        _LOGGER.debug("Found %s persons on %s", len(users), self.client.name)
        return [Person.from_dict(user) for user in users]

    def count(self) -> int:
        response = self.client.get(ENDPOINT_COUNT)
        return int(deep_get(response, "UserInfoCount.userNumber", 0) or 0)
