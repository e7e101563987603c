from pathlib import Path
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from kubetranslate.ir.models import IR, EnhancedIR
    from kubetranslate.models.objects import K8sObject


class ResourceConverter(Protocol):
    """Defines the contract for converting IR into objects of some kinds."""

    def get_supported_kinds(self) -> list[str]:
        """
        Returns the kinds this converter owns (e.g., ["Deployment"]).
        """
        ...

    def convert_ir_to_objects(
        self, ir: "EnhancedIR"
    ) -> tuple[list["K8sObject"], list["K8sObject"]]:
        """
        Convert the IR into objects.

        Args:
            ir: The enhanced IR to convert

        Returns:
            Tuple of (produced objects, cached objects this converter declined)
        """
        ...


class Transformer(Protocol):
    """Defines the contract for a transformation strategy in the pipeline."""

    name: str

    def transform(self, ir: "IR") -> None:
        """
        Populate the transformer's object set from the IR.

        Args:
            ir: Intermediate representation shared by all transformers
        """
        ...

    def write_objects(self, output_path: Path, transform_paths: list[Path]) -> None:
        """
        Fix, convert, run rule-sets over and write the transformer's objects.

        Args:
            output_path: Root output directory of the run
            transform_paths: Rule-set files applied to the generated resources
        """
        ...
