import json
import os
from typing import Dict, Optional


class MessageCatalog:
    """
    Copy text for insights, tips and recommendations.

    Rule tables in the services select a message *key*; the catalog turns the
    key into display text. Templates use ``str.format`` placeholders.
    """

    def __init__(self, catalog_path: Optional[str] = None):
        if catalog_path is None:
            catalog_path = os.path.join(os.path.dirname(__file__), 'insight_messages.json')
        with open(catalog_path, 'r', encoding='utf-8') as f:
            self.messages: Dict[str, Dict[str, str]] = json.load(f)
    
    def get_section(self, section: str) -> Dict[str, str]:
        #Get all templates for one section (e.g. 'tip')
        return self.messages.get(section, {})
    
    def has_message(self, section: str, key: str) -> bool:
        return key in self.get_section(section)
    
    def render(self, section: str, key: str, **values) -> str:
        """
        Render a template, e.g. ``render('tip', 'difficult_day', day='Friday')``.

        Raises:
            KeyError: if the section/key pair does not exist
        """
        template = self.get_section(section)[key]
        return template.format(**values)


_default_catalog: Optional[MessageCatalog] = None


def get_default_catalog() -> MessageCatalog:
    """Bundled catalog, loaded once; it is read-only after loading."""
    global _default_catalog
    if _default_catalog is None:
        _default_catalog = MessageCatalog()
    return _default_catalog
