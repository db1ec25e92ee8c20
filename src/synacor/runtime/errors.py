''' Error kinds raised by the loader and the machine '''


class LoadError(Exception):
    pass


class ExecutionError(Exception):
    ''' Fatal condition; stops the execution loop '''
    pass


class UndefinedOpcode(ExecutionError):
    pass


class InvalidInstruction(ExecutionError):
    pass


class InvalidRegisterAddress(ExecutionError):
    pass


class InvalidAddress(ExecutionError):
    pass


class DivisionByZero(ExecutionError):
    pass


class InputError(ExecutionError):
    pass


class StackUnderflow(Exception):
    ''' Empty stack on pop; handled by the machine as a graceful halt '''
    pass
