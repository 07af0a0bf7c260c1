"""
Field-name translation for incoming payloads.

Clients send a mix of Spanish names (`nombre`, `cantidad`), camelCase English
(`minStock`, `productId`) and the snake_case model names. Serializers declare
an alias table and inputs are normalized before validation.
"""


def translate_fields(data, aliases):
    """
    Return a plain dict where every alias key is renamed to its canonical name.

    A canonical key already present wins over its aliases, and the first alias
    found wins over later ones. Keys without an alias pass through unchanged.
    """
    if hasattr(data, 'dict') and callable(data.dict):
        # QueryDict from form-encoded requests
        data = data.dict()
    translated = {}
    for key, value in data.items():
        canonical = aliases.get(key, key)
        if canonical != key and canonical in data:
            continue
        if canonical in translated and canonical != key:
            continue
        translated[canonical] = value
    return translated


class TranslatedFieldsMixin:
    """Serializer mixin applying `field_aliases` before normal validation"""
    field_aliases = {}

    def to_internal_value(self, data):
        if self.field_aliases and hasattr(data, 'items'):
            data = translate_fields(data, self.field_aliases)
        return super().to_internal_value(data)
