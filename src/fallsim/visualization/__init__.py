from .readouts import NOT_APPLICABLE, fall_fraction, format_terminal_velocity, readouts
