from enum import Enum


class ActorRole(str, Enum):
    customer = "customer"
    mechanic = "mechanic"

    @property
    def display_name(self) -> str:
        return "Mechanic" if self is ActorRole.mechanic else "Customer"

    @staticmethod
    def from_flag(is_mechanic: bool) -> "ActorRole":
        return ActorRole.mechanic if is_mechanic else ActorRole.customer
