from vault.constants import Constants as c
from vault.exceptions import (
    OwnerAlreadyExists,
    OwnerNotFound,
    OwnerRemovalInvalid,
    RequirementInvalid,
    TooManyOwners,
)


class OwnerRegistry:
    def __init__(self, owners: list[str], required: int, max_owners: int = c.MAX_OWNERS):
        self.max_owners = max_owners
        self._owners = []
        self._index = {}

        if len(owners) == 0:
            raise RequirementInvalid('At least one owner is required.')

        for owner in owners:
            self.check_add(owner)
            self._append(owner)

        self.check_requirement(required)
        self.required = required

    def _append(self, owner):
        self._index[owner] = len(self._owners)
        self._owners.append(owner)

    def _reindex(self):
        self._index = {owner: i for i, owner in enumerate(self._owners)}

    def is_owner(self, owner: str) -> bool:
        return owner in self._index

    def owner_count(self) -> int:
        return len(self._owners)

    def owner_at(self, index: int) -> str:
        if index < 0 or index >= len(self._owners):
            raise IndexError(f'No owner at index {index}.')
        return self._owners[index]

    def owners(self) -> list[str]:
        return list(self._owners)

    def check_add(self, owner: str):
        if self.is_owner(owner):
            raise OwnerAlreadyExists(owner)
        if len(self._owners) >= self.max_owners:
            raise TooManyOwners(f'Cannot exceed {self.max_owners} owners.')

    def check_remove(self, owner: str):
        if not self.is_owner(owner):
            raise OwnerNotFound(owner)
        if len(self._owners) - 1 < max(self.required, 1):
            raise OwnerRemovalInvalid(
                f'Removing {owner} leaves {len(self._owners) - 1} owners for requirement {self.required}.'
            )

    def check_replace(self, old: str, new: str):
        if not self.is_owner(old):
            raise OwnerNotFound(old)
        if self.is_owner(new):
            raise OwnerAlreadyExists(new)

    def check_requirement(self, required: int):
        if type(required) != int or required < 1 or required > len(self._owners):
            raise RequirementInvalid(f'Requirement {required} with {len(self._owners)} owners.')

    def add(self, owner: str):
        self.check_add(owner)
        self._append(owner)

    def remove(self, owner: str):
        self.check_remove(owner)
        self._owners.remove(owner)
        self._reindex()

    def replace(self, old: str, new: str):
        # The new owner takes over the old owner's position.
        self.check_replace(old, new)
        position = self._index.pop(old)
        self._owners[position] = new
        self._index[new] = position

    def change_requirement(self, required: int):
        self.check_requirement(required)
        self.required = required
