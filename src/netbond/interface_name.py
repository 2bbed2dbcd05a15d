# SPDX-License-Identifier: BSD-2-Clause

from typing import Annotated

from pydantic import AfterValidator, StrictStr

# IFNAMSIZ includes the trailing NUL
MAX_INTERFACE_NAME_LENGTH = 15


def check_interface_name(name: str) -> str:
    if not name:
        raise ValueError("interface name must not be empty")
    if len(name.encode()) > MAX_INTERFACE_NAME_LENGTH:
        raise ValueError(f"interface name '{name}' is longer than {MAX_INTERFACE_NAME_LENGTH} bytes")
    if name in ('.', '..'):
        raise ValueError(f"interface name '{name}' is reserved")
    for char in name:
        if char in '/:' or char.isspace():
            raise ValueError(f"interface name '{name}' contains invalid character {char!r}")
    return name


InterfaceName = Annotated[StrictStr, AfterValidator(check_interface_name)]
