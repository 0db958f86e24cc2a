"""Tree-walking evaluator for Lox.

The interpreter executes resolved statement lists. Statements run through
`execute`, expressions through `evaluate`; both dispatch on the node class.
`return` and `break` don't raise: `execute` hands back a `ReturnSignal` or
`BreakSignal` and every compound statement passes it outward until a
function call or loop consumes it. Runtime errors are raised as
`LoxRuntimeError` and caught once per top-level statement list in
`interpret`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from .ast import (
    Expr, Literal, Variable, Assign, Unary, Binary, Logical, Ternary,
    Grouping, Call, Get, Set, This, Super,
    Stmt, Expression, Print, Var, Block, If, While, Break, Return,
    Function, Class,
)
from .builtin_function import LoxCallable
from .environment import Environment
from .errors import BREAK, BreakSignal, LoxRuntimeError, ReturnSignal
from .std import populate_globals
from .tokens import Token, TokenType
from .types import LoxClass, LoxInstance, is_equal, is_number, is_truthy, to_string, type_name

if TYPE_CHECKING:
    from .lox import Lox


Signal = Union[None, ReturnSignal, BreakSignal]


class LoxFunction(LoxCallable):
    """A user-defined function or method closed over its defining scope."""
    def __init__(self, declaration: Function, closure: Environment, is_initializer: bool = False):
        self.declaration = declaration
        self.closure = closure
        self.is_initializer = is_initializer

    def arity(self) -> int:
        return len(self.declaration.params)

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        environment = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            environment.define(param.lexeme, argument)
        result = interpreter.execute_function_body(self.declaration.body, environment)
        if self.is_initializer:
            return self.closure.get_value_at(0, 'this')
        if isinstance(result, ReturnSignal):
            return result.value
        return None

    def bind(self, instance: LoxInstance) -> 'LoxFunction':
        environment = Environment(self.closure)
        environment.define('this', instance)
        return LoxFunction(self.declaration, environment, self.is_initializer)

    def __str__(self) -> str:
        return f"<fn {self.declaration.name.lexeme}>"

    __repr__ = __str__


class Interpreter:
    """Core interpreter that executes a resolved Lox AST."""
    def __init__(self, host: 'Lox', debug_level: int = 0, debug_file: str = 'debug.txt'):
        self.host = host
        self.globals = populate_globals(Environment())
        self.environment = self.globals
        # resolution side table: expression node -> scope distance
        self.locals: Dict[Expr, int] = {}
        # loops entered in the current function frame
        self.loop_depth = 0
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 else None

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    def close(self) -> None:
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    # Public API
    def interpret(self, statements: List[Stmt]) -> None:
        try:
            for stmt in statements:
                if self.debug_level >= 1:
                    self.debug(f"execute {type(stmt).__name__}")
                self.execute(stmt)
        except LoxRuntimeError as error:
            if self.debug_level >= 1:
                self.debug(f"runtime error at line {error.token.line}: {error.message}")
            self.host.runtime_error(error)

    def resolve(self, expr: Expr, depth: int) -> None:
        self.locals[expr] = depth

    # Statements

    def execute(self, node: Stmt) -> Signal:
        if isinstance(node, Expression):
            self.evaluate(node.expression)
            return None
        if isinstance(node, Print):
            value = self.evaluate(node.expression)
            self.host.log_out(to_string(value))
            return None
        if isinstance(node, Var):
            name = node.name.lexeme
            if name not in self.environment.values:
                # visible but unreadable while its initializer runs
                self.environment.define(name)
            value = self.evaluate(node.initializer) if node.initializer is not None else None
            self.environment.define(name, value)
            if self.debug_level >= 2:
                self.debug(f"declare {name}: {type_name(value)} = {to_string(value)}")
            return None
        if isinstance(node, Block):
            return self.execute_block(node.statements, Environment(self.environment))
        if isinstance(node, If):
            cond = self.evaluate(node.condition)
            truthy = is_truthy(cond)
            if self.debug_level >= 3:
                self.debug(f"if condition {to_string(cond)} -> {truthy}")
            if truthy:
                return self.execute(node.then_branch)
            if node.else_branch is not None:
                return self.execute(node.else_branch)
            return None
        if isinstance(node, While):
            self.loop_depth += 1
            try:
                while is_truthy(self.evaluate(node.condition)):
                    res = self.execute(node.body)
                    if isinstance(res, BreakSignal):
                        break
                    if isinstance(res, ReturnSignal):
                        return res
            finally:
                self.loop_depth -= 1
            return None
        if isinstance(node, Break):
            if self.loop_depth == 0:
                raise LoxRuntimeError(node.keyword, "Break occurred outside loop.")
            return BREAK
        if isinstance(node, Return):
            value = self.evaluate(node.value) if node.value is not None else None
            return ReturnSignal(value)
        if isinstance(node, Function):
            function = LoxFunction(node, self.environment)
            self.environment.define(node.name.lexeme, function)
            if self.debug_level >= 2:
                self.debug(f"define function {node.name.lexeme}")
            return None
        if isinstance(node, Class):
            self.execute_class(node)
            return None
        raise NotImplementedError(f"execute: unexpected node type {type(node)}")

    def execute_block(self, statements: List[Stmt], environment: Environment) -> Signal:
        previous = self.environment
        try:
            self.environment = environment
            for stmt in statements:
                result = self.execute(stmt)
                # propagate return and break signals
                if result is not None:
                    return result
            return None
        finally:
            self.environment = previous

    def execute_function_body(self, body: List[Stmt], environment: Environment) -> Signal:
        # a break inside a function can't reach loops of its caller
        saved_depth = self.loop_depth
        self.loop_depth = 0
        try:
            return self.execute_block(body, environment)
        finally:
            self.loop_depth = saved_depth

    def execute_class(self, node: Class) -> None:
        superclass: Optional[LoxClass] = None
        if node.superclass is not None:
            value = self.evaluate(node.superclass)
            if not isinstance(value, LoxClass):
                raise LoxRuntimeError(node.superclass.name, "Superclass must be a class.")
            superclass = value

        self.environment.define(node.name.lexeme)
        if superclass is not None:
            self.environment = Environment(self.environment)
            self.environment.define('super', superclass)

        methods: Dict[str, LoxFunction] = {}
        for method in node.methods:
            methods[method.name.lexeme] = LoxFunction(
                method, self.environment, method.name.lexeme == 'init')
        klass = LoxClass(node.name.lexeme, superclass, methods)

        if superclass is not None:
            self.environment = self.environment.enclosing
        self.environment.assign(node.name, klass)
        if self.debug_level >= 2:
            self.debug(f"define class {node.name.lexeme} with {len(methods)} method(s)")

    # Expressions

    def evaluate(self, node: Expr) -> Any:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Grouping):
            return self.evaluate(node.expression)
        if isinstance(node, Variable):
            return self.look_up_variable(node.name, node)
        if isinstance(node, Assign):
            value = self.evaluate(node.value)
            distance = self.locals.get(node)
            if distance is not None:
                self.environment.assign_at(distance, node.name, value)
            else:
                self.globals.assign(node.name, value)
            return value
        if isinstance(node, Unary):
            right = self.evaluate(node.right)
            if node.operator.type == TokenType.MINUS:
                self.check_number_operand(node.operator, right)
                return -right
            if node.operator.type == TokenType.BANG:
                return not is_truthy(right)
            raise LoxRuntimeError(node.operator, f"Unknown unary operator '{node.operator.lexeme}'.")
        if isinstance(node, Binary):
            left = self.evaluate(node.left)
            right = self.evaluate(node.right)
            return self.apply_binary_op(node.operator, left, right)
        if isinstance(node, Logical):
            left = self.evaluate(node.left)
            if node.operator.type == TokenType.OR:
                if is_truthy(left):
                    return left
            elif not is_truthy(left):
                return left
            return self.evaluate(node.right)
        if isinstance(node, Ternary):
            if is_truthy(self.evaluate(node.condition)):
                return self.evaluate(node.then_branch)
            return self.evaluate(node.else_branch)
        if isinstance(node, Call):
            callee = self.evaluate(node.callee)
            args = [self.evaluate(arg) for arg in node.arguments]
            return self.call_function(callee, args, node.paren)
        if isinstance(node, Get):
            obj = self.evaluate(node.object)
            if isinstance(obj, LoxInstance):
                return obj.get(node.name)
            raise LoxRuntimeError(node.name, "Only instances have properties.")
        if isinstance(node, Set):
            obj = self.evaluate(node.object)
            if not isinstance(obj, LoxInstance):
                raise LoxRuntimeError(node.name, "Only instances have fields.")
            value = self.evaluate(node.value)
            obj.set(node.name, value)
            return value
        if isinstance(node, This):
            return self.look_up_variable(node.keyword, node)
        if isinstance(node, Super):
            distance = self.locals[node]
            superclass = self.environment.get_value_at(distance, 'super')
            # 'this' lives in the scope just inside the one holding 'super'
            obj = self.environment.get_value_at(distance - 1, 'this')
            method = superclass.find_method(node.method.lexeme)
            if method is None:
                raise LoxRuntimeError(node.method, f"Undefined property '{node.method.lexeme}'.")
            return method.bind(obj)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    def look_up_variable(self, name: Token, expr: Expr) -> Any:
        distance = self.locals.get(expr)
        if self.debug_level >= 3:
            where = 'global' if distance is None else f"distance {distance}"
            self.debug(f"lookup {name.lexeme} at {where}")
        if distance is not None:
            return self.environment.get_at(distance, name)
        return self.globals.get(name)

    def call_function(self, callee: Any, args: List[Any], paren: Token) -> Any:
        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(paren, "Can only call functions and classes.")
        if len(args) != callee.arity():
            raise LoxRuntimeError(paren, f"Expected {callee.arity()} arguments but got {len(args)}.")
        if self.debug_level >= 2:
            self.debug(f"call {to_string(callee)} with {len(args)} argument(s)")
        try:
            return callee.call(self, args)
        except RecursionError:
            # the innermost call reports; outer frames see a LoxRuntimeError
            raise LoxRuntimeError(paren, "Stack overflow.") from None

    def apply_binary_op(self, operator: Token, a: Any, b: Any) -> Any:
        op = operator.type
        if op == TokenType.EQUAL_EQUAL:
            return is_equal(a, b)
        if op == TokenType.BANG_EQUAL:
            return not is_equal(a, b)
        if op == TokenType.PLUS:
            if is_number(a) and is_number(b):
                return a + b
            # If either operand is string, perform concatenation
            if isinstance(a, str) or isinstance(b, str):
                return to_string(a) + to_string(b)
            raise LoxRuntimeError(operator, "Operands must be two numbers or at least one string.")

        self.check_number_operands(operator, a, b)
        if op == TokenType.MINUS:
            return a - b
        if op == TokenType.STAR:
            return a * b
        if op == TokenType.SLASH:
            if b == 0.0:
                raise LoxRuntimeError(operator, "Division by zero")
            return a / b
        if op == TokenType.GREATER:
            return a > b
        if op == TokenType.GREATER_EQUAL:
            return a >= b
        if op == TokenType.LESS:
            return a < b
        if op == TokenType.LESS_EQUAL:
            return a <= b
        raise LoxRuntimeError(operator, f"Unknown operator '{operator.lexeme}'.")

    @staticmethod
    def check_number_operand(operator: Token, operand: Any) -> None:
        if not is_number(operand):
            raise LoxRuntimeError(operator, "Operand must be a number.")

    @staticmethod
    def check_number_operands(operator: Token, left: Any, right: Any) -> None:
        if not (is_number(left) and is_number(right)):
            raise LoxRuntimeError(operator, "Operands must be numbers.")
