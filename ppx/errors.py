"""errors raised and warnings issued by the calculators"""


class ConfigurationError(ValueError):
    """
    the calculation was asked for something it can't do: an unsupported
    game mode or score version, hit objects out of order, an invalid mod
    combination or missing inputs. no result is produced.
    """
    pass


class InputWarning(UserWarning):
    """
    the input was odd but usable (max combo <= 0, no hit objects).
    the calculation falls back to a defined value and keeps going.
    """
    pass
