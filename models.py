"""
Database models for the personal finance API.

Monetary values are stored as integer cents and transaction dates as
unix timestamps (seconds, UTC).
"""
from datetime import datetime

from werkzeug.security import generate_password_hash, check_password_hash

from extensions import db


# Transaction types
TRX_TYPE_INCOME = 'I'
TRX_TYPE_EXPENSE = 'E'
TRX_TYPE_TRANSFER = 'T'
TRX_TYPES = (TRX_TYPE_INCOME, TRX_TYPE_EXPENSE, TRX_TYPE_TRANSFER)

# Category types
CATEGORY_TYPE_CREDIT = 'C'
CATEGORY_TYPE_DEBIT = 'D'
CATEGORY_TYPE_MIXED = 'M'
CATEGORY_TYPES = (CATEGORY_TYPE_CREDIT, CATEGORY_TYPE_DEBIT, CATEGORY_TYPE_MIXED)

# Status shared by categories and accounts
STATUS_ACTIVE = 'Active'
STATUS_INACTIVE = 'Inactive'
STATUSES = (STATUS_ACTIVE, STATUS_INACTIVE)

ACCOUNT_TYPES = ('CHEAC', 'SAVAC', 'INVAC', 'CREAC', 'MEALAC', 'WALLET', 'OTHAC')


class User(db.Model):
    """User model for authentication."""

    __tablename__ = 'users'

    user_id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    username = db.Column(db.String(45), unique=True, nullable=False, index=True)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password = db.Column(db.String(255), nullable=False)
    sessionkey = db.Column(db.String(255), nullable=True)
    sessionkey_mobile = db.Column(db.String(255), nullable=True)
    trustlimit = db.Column(db.Integer, nullable=True)
    trustlimit_mobile = db.Column(db.Integer, nullable=True)
    last_update_timestamp = db.Column(db.BigInteger, default=0, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    accounts = db.relationship('Account', back_populates='user', cascade='all, delete-orphan')
    categories = db.relationship('Category', back_populates='user', cascade='all, delete-orphan')
    entities = db.relationship('Entity', back_populates='user', cascade='all, delete-orphan')
    tags = db.relationship('Tag', back_populates='user', cascade='all, delete-orphan')
    budgets = db.relationship('Budget', back_populates='user', cascade='all, delete-orphan')

    def set_password(self, password):
        """Hash and set the user's password."""
        self.password = generate_password_hash(password, method='pbkdf2:sha256')

    def check_password(self, password):
        """Check if the provided password matches the hash."""
        return check_password_hash(self.password, password)

    def __repr__(self):
        return f'<User {self.user_id}: {self.username}>'

    def to_dict(self):
        return {
            'user_id': self.user_id,
            'username': self.username,
            'email': self.email,
            'last_update_timestamp': self.last_update_timestamp,
        }


class Account(db.Model):
    """A bank account, wallet or credit card owned by a user."""

    __tablename__ = 'accounts'
    __table_args__ = (
        db.UniqueConstraint('users_user_id', 'name', name='unique_user_account_name'),
    )

    account_id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    users_user_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    type = db.Column(db.String(45), nullable=False)  # One of ACCOUNT_TYPES
    description = db.Column(db.Text, nullable=True)
    exclude_from_budgets = db.Column(db.Boolean, default=False, nullable=False)
    status = db.Column(db.String(45), default=STATUS_ACTIVE, nullable=False)
    current_balance = db.Column(db.BigInteger, default=0, nullable=False)  # cents
    color_gradient = db.Column(db.String(45), nullable=True)
    created_timestamp = db.Column(db.BigInteger, nullable=True)
    updated_timestamp = db.Column(db.BigInteger, nullable=True)

    # Relationships
    user = db.relationship('User', back_populates='accounts')

    def __repr__(self):
        return f'<Account {self.account_id}: {self.name}>'

    def to_dict(self):
        """Convert account to dictionary for JSON."""
        return {
            'account_id': self.account_id,
            'users_user_id': self.users_user_id,
            'name': self.name,
            'type': self.type,
            'description': self.description,
            'exclude_from_budgets': self.exclude_from_budgets,
            'status': self.status,
            'current_balance': self.current_balance,
            'color_gradient': self.color_gradient,
            'created_timestamp': self.created_timestamp,
            'updated_timestamp': self.updated_timestamp,
        }


class Category(db.Model):
    """Transaction category (per user)."""

    __tablename__ = 'categories'
    __table_args__ = (
        db.UniqueConstraint('users_user_id', 'name', name='unique_user_category_name'),
    )

    category_id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    users_user_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    type = db.Column(db.String(1), default=CATEGORY_TYPE_MIXED, nullable=False)  # C, D or M
    description = db.Column(db.Text, nullable=True)
    color_gradient = db.Column(db.String(45), nullable=True)
    status = db.Column(db.String(45), default=STATUS_ACTIVE, nullable=False)
    exclude_from_budgets = db.Column(db.Boolean, default=False, nullable=False)

    # Relationships
    user = db.relationship('User', back_populates='categories')

    def __repr__(self):
        return f'<Category {self.category_id}: {self.name}>'

    def to_dict(self):
        """Convert category to dictionary for JSON."""
        return {
            'category_id': self.category_id,
            'users_user_id': self.users_user_id,
            'name': self.name,
            'type': self.type,
            'description': self.description,
            'color_gradient': self.color_gradient,
            'status': self.status,
            'exclude_from_budgets': self.exclude_from_budgets,
        }


class Entity(db.Model):
    """Counterparty of a transaction (shop, employer, ...)."""

    __tablename__ = 'entities'
    __table_args__ = (
        db.UniqueConstraint('users_user_id', 'name', name='unique_user_entity_name'),
    )

    entity_id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    users_user_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)

    user = db.relationship('User', back_populates='entities')

    def __repr__(self):
        return f'<Entity {self.entity_id}: {self.name}>'

    def to_dict(self):
        return {
            'entity_id': self.entity_id,
            'users_user_id': self.users_user_id,
            'name': self.name,
        }


class Tag(db.Model):
    """Free-form label that can be attached to transactions."""

    __tablename__ = 'tags'
    __table_args__ = (
        db.UniqueConstraint('users_user_id', 'name', name='unique_user_tag_name'),
    )

    tag_id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    users_user_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)

    user = db.relationship('User', back_populates='tags')

    def __repr__(self):
        return f'<Tag {self.tag_id}: {self.name}>'

    def to_dict(self):
        return {
            'tag_id': self.tag_id,
            'users_user_id': self.users_user_id,
            'name': self.name,
            'description': self.description,
        }


class TransactionHasTags(db.Model):
    """Association table between transactions and tags."""

    __tablename__ = 'transaction_has_tags'

    transactions_transaction_id = db.Column(
        db.Integer, db.ForeignKey('transactions.transaction_id'), primary_key=True
    )
    tags_tag_id = db.Column(db.Integer, db.ForeignKey('tags.tag_id'), primary_key=True)


class Transaction(db.Model):
    """A single income, expense or transfer."""

    __tablename__ = 'transactions'
    __table_args__ = (
        db.Index('idx_category_date', 'categories_category_id', 'date_timestamp'),
    )

    transaction_id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    date_timestamp = db.Column(db.BigInteger, nullable=False, index=True)
    amount = db.Column(db.BigInteger, nullable=False)  # cents, always positive
    type = db.Column(db.String(1), nullable=False)  # I, E or T
    description = db.Column(db.Text, nullable=True)
    entities_entity_id = db.Column(db.Integer, db.ForeignKey('entities.entity_id'), nullable=True)
    accounts_account_from_id = db.Column(
        db.Integer, db.ForeignKey('accounts.account_id'), nullable=True, index=True
    )
    accounts_account_to_id = db.Column(
        db.Integer, db.ForeignKey('accounts.account_id'), nullable=True, index=True
    )
    categories_category_id = db.Column(db.Integer, db.ForeignKey('categories.category_id'), nullable=True)
    is_essential = db.Column(db.Boolean, default=False, nullable=False)

    # Relationships
    entity = db.relationship('Entity')
    category = db.relationship('Category')
    account_from = db.relationship('Account', foreign_keys=[accounts_account_from_id])
    account_to = db.relationship('Account', foreign_keys=[accounts_account_to_id])
    tags = db.relationship('Tag', secondary='transaction_has_tags', lazy='selectin')

    def __repr__(self):
        return f'<Transaction {self.transaction_id}: {self.type} {self.amount}>'

    def to_dict(self):
        """Convert transaction to dictionary for JSON serialization."""
        return {
            'transaction_id': self.transaction_id,
            'date_timestamp': self.date_timestamp,
            'amount': self.amount,
            'type': self.type,
            'description': self.description,
            'entity_id': self.entities_entity_id,
            'entity_name': self.entity.name if self.entity else None,
            'account_from_id': self.accounts_account_from_id,
            'account_from_name': self.account_from.name if self.account_from else None,
            'account_to_id': self.accounts_account_to_id,
            'account_to_name': self.account_to.name if self.account_to else None,
            'category_id': self.categories_category_id,
            'category_name': self.category.name if self.category else None,
            'is_essential': self.is_essential,
            'tags': [tag.name for tag in self.tags],
        }


class Budget(db.Model):
    """Monthly budget for a user."""

    __tablename__ = 'budgets'
    __table_args__ = (
        db.UniqueConstraint('users_user_id', 'month', 'year', name='unique_user_budget_month'),
    )

    budget_id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    users_user_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False, index=True)
    month = db.Column(db.Integer, nullable=False)
    year = db.Column(db.Integer, nullable=False)
    observations = db.Column(db.Text, nullable=True)
    is_open = db.Column(db.Boolean, default=True, nullable=False)
    initial_balance = db.Column(db.BigInteger, nullable=True)  # cents

    # Relationships
    user = db.relationship('User', back_populates='budgets')
    categories = db.relationship('BudgetHasCategories', back_populates='budget', cascade='all, delete-orphan')

    def __repr__(self):
        return f'<Budget {self.budget_id}: {self.year}-{self.month:02d}>'

    def to_dict(self):
        return {
            'budget_id': self.budget_id,
            'users_user_id': self.users_user_id,
            'month': self.month,
            'year': self.year,
            'observations': self.observations,
            'is_open': self.is_open,
            'initial_balance': self.initial_balance,
        }


class BudgetHasCategories(db.Model):
    """Planned and realised amounts of a category within a budget."""

    __tablename__ = 'budgets_has_categories'

    budgets_budget_id = db.Column(db.Integer, db.ForeignKey('budgets.budget_id'), primary_key=True)
    budgets_users_user_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False, index=True)
    categories_category_id = db.Column(db.Integer, db.ForeignKey('categories.category_id'), primary_key=True)
    planned_amount_credit = db.Column(db.BigInteger, default=0, nullable=False)  # cents
    planned_amount_debit = db.Column(db.BigInteger, default=0, nullable=False)  # cents
    current_amount = db.Column(db.BigInteger, default=0, nullable=False)  # cents, set when closed

    # Relationships
    budget = db.relationship('Budget', back_populates='categories')
    category = db.relationship('Category')

    def __repr__(self):
        return f'<BudgetHasCategories budget={self.budgets_budget_id} category={self.categories_category_id}>'
