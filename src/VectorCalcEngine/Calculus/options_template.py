# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
# SPDX-License-Identifier: MPL-2.0
from typing import Any, Dict, List, Type


class OptionProp:
    """
    Registered option property
    """

    def __init__(self, prop_name: str, tpe: Type, definition: str = ""):
        """

        :param prop_name: name of the attribute
        :param tpe: data type [Type[int], Type[bool], Type[float], Type[str]]
        :param definition: Definition of the property
        """
        self.name = prop_name

        self.tpe = tpe

        self.definition = definition


class OptionsTemplate:
    """
    Options template
    """

    def __init__(self, name: str):
        """

        :param name: name of the options set
        """
        self.name = name

        self.registered_properties: Dict[str, OptionProp] = dict()

    def register(self, key: str, tpe: Type, definition: str = ""):
        """
        Register property
        The property must exist
        :param key: name of the attribute
        :param tpe: type of the attribute
        :param definition: Definition of the property
        """
        if not hasattr(self, key):
            raise AttributeError(f"{self.name} has no property {key} to register")

        if key in self.registered_properties.keys():
            raise KeyError(f"Property {key} already registered!")

        self.registered_properties[key] = OptionProp(prop_name=key, tpe=tpe, definition=definition)

    def get_keys(self) -> List[str]:
        return list(self.registered_properties.keys())

    def to_dict(self) -> Dict[str, Any]:
        """
        Get the registered properties as a dictionary
        :return: {key: value}
        """
        return {key: getattr(self, key) for key in self.registered_properties.keys()}

    def parse(self, data: Dict[str, Any]) -> None:
        """
        Set the registered properties from a dictionary, converting to the registered type
        Unknown keys are ignored
        :param data: {key: value}
        """
        for key, val in data.items():
            prop = self.registered_properties.get(key, None)
            if prop is not None:
                setattr(self, key, prop.tpe(val))

    def __str__(self) -> str:
        return self.name + ": " + ", ".join(f"{k}={v}" for k, v in self.to_dict().items())
