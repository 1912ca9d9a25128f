"""
Template Reconciler for ConfigVault.

Merges the user's template list with the shipped catalog by template id:

- Shipped template with a different file_version: the shipped content
  replaces the user's copy and is flagged ``update_available``
- Shipped template with the same file_version: the shipped content is kept
  and the user's pending ``update_available`` notice is carried forward
- User template unknown to the catalog: kept unchanged after the shipped ones

Edits a user made to a built-in template are lost when its file_version
changes; only the update notice survives.
"""

from typing import Dict, List, Sequence
from uuid import UUID

from configvault.utils.logger import logger

from ..schemas.template import ModelTemplate


def reconcile_templates(
    current_templates: Sequence[ModelTemplate],
    default_templates: Sequence[ModelTemplate],
) -> List[ModelTemplate]:
    """
    Reconcile templates by identity.

    Args:
        current_templates: Templates from the user's existing settings
        default_templates: Templates from the newly shipped defaults

    Returns:
        New list: every shipped template (in catalog order) followed by the
        user's templates the catalog does not contain (in their order).
        Inputs are not modified.
    """
    merged = [template.model_copy(deep=True) for template in default_templates]
    by_id: Dict[UUID, ModelTemplate] = {template.id: template for template in merged}
    user_owned: List[ModelTemplate] = []

    for current in current_templates:
        shipped = by_id.get(current.id)
        if shipped is None:
            user_owned.append(current.model_copy(deep=True))
            continue

        if shipped.file_version != current.file_version:
            logger.info(
                f"Template '{shipped.name}' updated "
                f"{current.file_version} -> {shipped.file_version}"
            )
            shipped.update_available = True
        else:
            shipped.update_available = current.update_available

    return merged + user_owned
