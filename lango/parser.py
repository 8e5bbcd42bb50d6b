"""Recursive-descent parser for the Lango language.

Grammar, lowest precedence first::

    program      → declaration* EOF
    declaration  → classDecl | funDecl | varDecl | statement
    classDecl    → "class" IDENT ( "<" IDENT )? "{" function* "}"
    funDecl      → "fun" function
    function     → IDENT "(" parameters? ")" block
    varDecl      → "var" IDENT ( "=" expression )? ";"
    statement    → exprStmt | forStmt | ifStmt | printStmt | returnStmt
                 | whileStmt | breakStmt | block
    ifStmt       → "if" "(" expression ")" statement
                   ( "elif" "(" expression ")" statement )*
                   ( "else" statement )?
    expression   → assignment
    assignment   → ( call "." )? IDENT "=" assignment | logic_or
    logic_or     → logic_and ( "or" logic_and )*
    logic_and    → equality ( "and" equality )*
    equality     → comparison ( ( "!=" | "==" ) comparison )*
    comparison   → term ( ( ">" | ">=" | "<" | "<=" ) term )*
    term         → factor ( ( "-" | "+" ) factor )*
    factor       → unary ( ( "/" | "*" ) unary )*
    unary        → ( "!" | "-" ) unary | call
    call         → primary ( "(" arguments? ")" | "." IDENT )*
    primary      → NUMBER | STRING | "true" | "false" | "nil" | "this"
                 | "super" "." IDENT | "(" expression ")" | IDENT
                 | "fun" "(" parameters? ")" block

Errors are reported through the error reporter. A broken declaration is
abandoned and the parser resynchronizes at the next statement boundary, so
each broken statement yields a single diagnostic.
"""

from __future__ import annotations

from typing import List, Optional

from .ast import (
    Expr, Stmt, Literal, Grouping, Unary, Binary, Logical, Variable, Assign,
    Call, Get, Set, This, Super, AnonymousFunction,
    Expression, Print, Var, Block, Elif, If, While, Function, Return, Break,
    Class,
)
from .errors import ParseError
from .reporter import ErrorReporter
from .tokens import Token, TokenType

MAX_ARGUMENTS = 255

# Tokens that begin a new declaration or statement; recovery stops at them.
STATEMENT_STARTS = {
    TokenType.CLASS,
    TokenType.FUN,
    TokenType.VAR,
    TokenType.FOR,
    TokenType.IF,
    TokenType.WHILE,
    TokenType.PRINT,
    TokenType.RETURN,
}


class Parser:
    def __init__(self, tokens: List[Token], reporter: ErrorReporter):
        self.tokens = tokens
        self.reporter = reporter
        self.pos = 0

    def parse(self) -> List[Stmt]:
        statements: List[Stmt] = []
        while not self.is_at_end():
            stmt = self.parse_declaration()
            if stmt is not None:
                statements.append(stmt)
        return statements

    # Token helpers

    def peek(self) -> Token:
        return self.tokens[self.pos]

    def previous(self) -> Token:
        return self.tokens[self.pos - 1]

    def peek_next(self) -> Token:
        if self.pos + 1 < len(self.tokens):
            return self.tokens[self.pos + 1]
        return self.tokens[-1]

    def is_at_end(self) -> bool:
        return self.peek().type == TokenType.EOF

    def check(self, type_: TokenType) -> bool:
        if self.is_at_end():
            return False
        return self.peek().type == type_

    def advance(self) -> Token:
        if not self.is_at_end():
            self.pos += 1
        return self.previous()

    def match(self, *types: TokenType) -> bool:
        for type_ in types:
            if self.check(type_):
                self.advance()
                return True
        return False

    def consume(self, type_: TokenType, message: str) -> Token:
        if self.check(type_):
            return self.advance()
        raise self.error(self.peek(), message)

    def error(self, token: Token, message: str) -> ParseError:
        self.reporter.error(token, message)
        return ParseError(message)

    def synchronize(self):
        self.advance()
        while not self.is_at_end():
            if self.previous().type == TokenType.SEMICOLON:
                return
            if self.peek().type in STATEMENT_STARTS:
                return
            self.advance()

    # Declarations

    def parse_declaration(self) -> Optional[Stmt]:
        try:
            if self.match(TokenType.CLASS):
                return self.parse_class_decl()
            # `fun (` starts an anonymous function expression statement
            if self.check(TokenType.FUN) and self.peek_next().type == TokenType.IDENTIFIER:
                self.advance()
                return self.parse_function('function')
            if self.match(TokenType.VAR):
                return self.parse_var_decl()
            return self.parse_statement()
        except ParseError:
            self.synchronize()
            return None

    def parse_class_decl(self) -> Class:
        name = self.consume(TokenType.IDENTIFIER, 'Expect class name.')
        superclass: Optional[Variable] = None
        if self.match(TokenType.LESS):
            self.consume(TokenType.IDENTIFIER, 'Expect superclass name.')
            superclass = Variable(self.previous())
        self.consume(TokenType.LEFT_BRACE, "Expect '{' before class body.")
        methods: List[Function] = []
        while not self.check(TokenType.RIGHT_BRACE) and not self.is_at_end():
            methods.append(self.parse_function('method'))
        self.consume(TokenType.RIGHT_BRACE, "Expect '}' after class body.")
        return Class(name, superclass, methods)

    def parse_function(self, kind: str) -> Function:
        name = self.consume(TokenType.IDENTIFIER, f'Expect {kind} name.')
        self.consume(TokenType.LEFT_PAREN, f"Expect '(' after {kind} name.")
        params = self.parse_parameters()
        self.consume(TokenType.LEFT_BRACE, f"Expect '{{' before {kind} body.")
        body = self.parse_block()
        return Function(name, params, body)

    def parse_parameters(self) -> List[Token]:
        """Parse a parameter list; the opening paren is already consumed."""
        params: List[Token] = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(params) >= MAX_ARGUMENTS:
                    self.error(self.peek(), f"Can't have more than {MAX_ARGUMENTS} parameters.")
                params.append(self.consume(TokenType.IDENTIFIER, 'Expect parameter name.'))
                if not self.match(TokenType.COMMA):
                    break
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after parameters.")
        return params

    def parse_var_decl(self) -> Var:
        name = self.consume(TokenType.IDENTIFIER, 'Expect variable name.')
        initializer: Optional[Expr] = None
        if self.match(TokenType.EQUAL):
            initializer = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return Var(name, initializer)

    # Statements

    def parse_statement(self) -> Stmt:
        if self.match(TokenType.FOR):
            return self.parse_for_stmt()
        if self.match(TokenType.IF):
            return self.parse_if_stmt()
        if self.match(TokenType.PRINT):
            return self.parse_print_stmt()
        if self.match(TokenType.RETURN):
            return self.parse_return_stmt()
        if self.match(TokenType.BREAK):
            return self.parse_break_stmt()
        if self.match(TokenType.WHILE):
            return self.parse_while_stmt()
        if self.match(TokenType.LEFT_BRACE):
            return Block(self.parse_block())
        return self.parse_expression_stmt()

    def parse_for_stmt(self) -> Stmt:
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'for'.")
        initializer: Optional[Stmt]
        if self.match(TokenType.SEMICOLON):
            initializer = None
        elif self.match(TokenType.VAR):
            initializer = self.parse_var_decl()
        else:
            initializer = self.parse_expression_stmt()

        condition: Optional[Expr] = None
        if not self.check(TokenType.SEMICOLON):
            condition = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after loop condition.")

        increment: Optional[Expr] = None
        if not self.check(TokenType.RIGHT_PAREN):
            increment = self.parse_expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self.parse_statement()

        # Desugar into a while loop.
        if increment is not None:
            body = Block([body, Expression(increment)])
        if condition is None:
            condition = Literal(True)
        body = While(condition, body)
        if initializer is not None:
            body = Block([initializer, body])
        return body

    def parse_if_stmt(self) -> If:
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self.parse_expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")
        then_branch = self.parse_statement()

        elif_branches: List[Elif] = []
        while self.match(TokenType.ELIF):
            self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'elif'.")
            elif_condition = self.parse_expression()
            self.consume(TokenType.RIGHT_PAREN, "Expect ')' after elif condition.")
            elif_branches.append(Elif(elif_condition, self.parse_statement()))

        else_branch: Optional[Stmt] = None
        if self.match(TokenType.ELSE):
            else_branch = self.parse_statement()
        return If(condition, then_branch, elif_branches, else_branch)

    def parse_print_stmt(self) -> Print:
        value = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return Print(value)

    def parse_return_stmt(self) -> Return:
        keyword = self.previous()
        value: Optional[Expr] = None
        if not self.check(TokenType.SEMICOLON):
            value = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after return value.")
        return Return(keyword, value)

    def parse_break_stmt(self) -> Break:
        keyword = self.previous()
        self.consume(TokenType.SEMICOLON, "Expect ';' after 'break'.")
        return Break(keyword)

    def parse_while_stmt(self) -> While:
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self.parse_expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after condition.")
        return While(condition, self.parse_statement())

    def parse_block(self) -> List[Stmt]:
        """Parse statements up to the closing brace; the opening one is consumed."""
        statements: List[Stmt] = []
        while not self.check(TokenType.RIGHT_BRACE) and not self.is_at_end():
            stmt = self.parse_declaration()
            if stmt is not None:
                statements.append(stmt)
        self.consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def parse_expression_stmt(self) -> Expression:
        expr = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return Expression(expr)

    # Expressions

    def parse_expression(self) -> Expr:
        return self.parse_assign()

    def parse_assign(self) -> Expr:
        expr = self.parse_logic_or()
        if self.match(TokenType.EQUAL):
            equals = self.previous()
            value = self.parse_assign()
            if isinstance(expr, Variable):
                return Assign(expr.name, value)
            if isinstance(expr, Get):
                return Set(expr.object, expr.name, value)
            # Reported, but the parser is not confused; no need to synchronize.
            self.error(equals, 'Invalid assignment target.')
        return expr

    def parse_logic_or(self) -> Expr:
        expr = self.parse_logic_and()
        while self.match(TokenType.OR):
            operator = self.previous()
            expr = Logical(expr, operator, self.parse_logic_and())
        return expr

    def parse_logic_and(self) -> Expr:
        expr = self.parse_equality()
        while self.match(TokenType.AND):
            operator = self.previous()
            expr = Logical(expr, operator, self.parse_equality())
        return expr

    def parse_equality(self) -> Expr:
        expr = self.parse_comparison()
        while self.match(TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL):
            operator = self.previous()
            expr = Binary(expr, operator, self.parse_comparison())
        return expr

    def parse_comparison(self) -> Expr:
        expr = self.parse_term()
        while self.match(TokenType.GREATER, TokenType.GREATER_EQUAL,
                         TokenType.LESS, TokenType.LESS_EQUAL):
            operator = self.previous()
            expr = Binary(expr, operator, self.parse_term())
        return expr

    def parse_term(self) -> Expr:
        expr = self.parse_factor()
        while self.match(TokenType.MINUS, TokenType.PLUS):
            operator = self.previous()
            expr = Binary(expr, operator, self.parse_factor())
        return expr

    def parse_factor(self) -> Expr:
        expr = self.parse_unary()
        while self.match(TokenType.SLASH, TokenType.STAR):
            operator = self.previous()
            expr = Binary(expr, operator, self.parse_unary())
        return expr

    def parse_unary(self) -> Expr:
        if self.match(TokenType.BANG, TokenType.MINUS):
            operator = self.previous()
            return Unary(operator, self.parse_unary())
        return self.parse_call()

    def parse_call(self) -> Expr:
        expr = self.parse_primary()
        while True:
            if self.match(TokenType.LEFT_PAREN):
                expr = self.finish_call(expr)
            elif self.match(TokenType.DOT):
                name = self.consume(TokenType.IDENTIFIER, "Expect property name after '.'.")
                expr = Get(expr, name)
            else:
                break
        return expr

    def finish_call(self, callee: Expr) -> Call:
        arguments: List[Expr] = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(arguments) >= MAX_ARGUMENTS:
                    self.error(self.peek(), f"Can't have more than {MAX_ARGUMENTS} arguments.")
                arguments.append(self.parse_expression())
                if not self.match(TokenType.COMMA):
                    break
        paren = self.consume(TokenType.RIGHT_PAREN, "Expect ')' after arguments.")
        return Call(callee, paren, arguments)

    def parse_primary(self) -> Expr:
        if self.match(TokenType.FALSE):
            return Literal(False)
        if self.match(TokenType.TRUE):
            return Literal(True)
        if self.match(TokenType.NIL):
            return Literal(None)
        if self.match(TokenType.NUMBER, TokenType.STRING):
            return Literal(self.previous().literal)
        if self.match(TokenType.THIS):
            return This(self.previous())
        if self.match(TokenType.SUPER):
            keyword = self.previous()
            self.consume(TokenType.DOT, "Expect '.' after 'super'.")
            method = self.consume(TokenType.IDENTIFIER, 'Expect superclass method name.')
            return Super(keyword, method)
        if self.match(TokenType.IDENTIFIER):
            return Variable(self.previous())
        if self.match(TokenType.FUN):
            keyword = self.previous()
            self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'fun'.")
            params = self.parse_parameters()
            self.consume(TokenType.LEFT_BRACE, "Expect '{' before function body.")
            return AnonymousFunction(keyword, params, self.parse_block())
        if self.match(TokenType.LEFT_PAREN):
            expr = self.parse_expression()
            self.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr)
        raise self.error(self.peek(), 'Expect expression.')


def parse_tokens(tokens: List[Token], reporter: ErrorReporter) -> List[Stmt]:
    """Parse a token list into top-level statements."""
    return Parser(tokens, reporter).parse()
