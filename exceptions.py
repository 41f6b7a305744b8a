class EvoSimError(Exception):
    """Base for all EvoSim exceptions."""

    pass


class ShapeMismatch(EvoSimError):
    """A genome, input vector or parent pair does not fit the expected shape."""

    pass


class InvalidConfiguration(EvoSimError):
    """A parameter is outside its valid range."""

    pass


class DegenerateSelection(EvoSimError):
    """Fitness-proportionate selection over a population with zero total fitness."""

    pass
