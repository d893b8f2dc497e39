class DotenvMissingVariableError(Exception):
    def __init__(self, variable_name: str):
        super().__init__(f"{variable_name} should be configured in the dotenv")


class DotenvInvalidVariableError(Exception):
    pass


class InvalidAppStateTypeError(Exception):
    def __init__(self):
        super().__init__("The type of the app state is not valid")


class TodoAlreadyExistsError(Exception):
    def __init__(self, todo_id: int):
        super().__init__(f"A todo with id {todo_id} already exists")
        self.todo_id = todo_id
