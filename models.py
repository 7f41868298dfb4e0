from flask_login import UserMixin
from flask import current_app
from datetime import datetime
from extensions import db
from schemas import BalanceEntry, InventoryLine, ProductLine


class User(UserMixin, db.Model):
    """Clinic staff account."""
    __tablename__ = 'user'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False, index=True)
    email = db.Column(db.String(120), unique=True, nullable=True, index=True)
    password_hash = db.Column(db.String(256))

    # 'admin', 'doctor', 'receptionist'
    role = db.Column(db.String(30), nullable=False, default='receptionist')

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    last_login = db.Column(db.DateTime, nullable=True)
    is_active = db.Column(db.Boolean, default=True)

    def __repr__(self):
        return f'<User {self.username}>'

    @property
    def is_admin(self):
        return self.role == 'admin'

    def has_permission(self, module, action):
        """Check whether this user's role allows `action` on `module`."""
        if not self.is_active:
            return False
        if self.is_admin:
            return True
        role_permissions = current_app.config['ROLE_PERMISSIONS'].get(self.role, {})
        return action in role_permissions.get(module, ())


class InventoryItem(db.Model):
    """
    Clinical consumable (gloves, anaesthetic, ...). Consumed, never sold.
    """
    __tablename__ = 'inventory_item'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    sku = db.Column(db.String(50), unique=True, nullable=True)
    unit = db.Column(db.String(20), nullable=True)  # pcs, box, pack, ...

    stock_quantity = db.Column(db.Integer, nullable=False, default=0)
    reorder_level = db.Column(db.Integer, default=10)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow)

    __table_args__ = (
        db.CheckConstraint('stock_quantity >= 0', name='ck_inventory_item_stock_non_negative'),
    )

    @property
    def is_low_stock(self):
        return self.stock_quantity <= (self.reorder_level or 0)

    def __repr__(self):
        return f'<InventoryItem {self.name}>'


class Product(db.Model):
    """
    Retail product sold over the counter. Prices in minor units.
    """
    __tablename__ = 'product'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    sku = db.Column(db.String(50), unique=True, nullable=True)
    unit = db.Column(db.String(20), nullable=True)

    price = db.Column(db.Integer, nullable=False)  # Selling price per item
    cost_price = db.Column(db.Integer, nullable=True)  # Unknown cost counts as 0 for profit

    stock_quantity = db.Column(db.Integer, nullable=False, default=0)
    reorder_level = db.Column(db.Integer, default=10)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow)

    __table_args__ = (
        db.CheckConstraint('stock_quantity >= 0', name='ck_product_stock_non_negative'),
    )

    @property
    def is_low_stock(self):
        return self.stock_quantity <= (self.reorder_level or 0)

    def __repr__(self):
        return f'<Product {self.name}>'


class Sale(db.Model):
    """
    One product line sold during a day-close. Prices are captured at sale
    time and never recomputed.
    """
    __tablename__ = 'sale'

    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(db.Integer, db.ForeignKey('product.id'), nullable=False)

    quantity = db.Column(db.Integer, nullable=False)
    unit_price = db.Column(db.Integer, nullable=False)
    cost_price = db.Column(db.Integer, nullable=False)
    total_amount = db.Column(db.Integer, nullable=False)  # unit_price * quantity
    profit = db.Column(db.Integer, nullable=False)  # (unit_price - cost_price) * quantity

    sale_date = db.Column(db.Date, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    product = db.relationship('Product', backref=db.backref('sales', lazy=True))

    __table_args__ = (
        db.CheckConstraint('quantity > 0', name='ck_sale_quantity_positive'),
    )

    def __repr__(self):
        return f'<Sale Product:{self.product_id} x{self.quantity}>'


class DailyReport(db.Model):
    """
    End-of-day summary submitted with a day-close. Append-only.
    """
    __tablename__ = 'daily_report'

    id = db.Column(db.Integer, primary_key=True)
    report_date = db.Column(db.Date, nullable=False, index=True)

    checked_in_count = db.Column(db.Integer, nullable=False)
    new_patients_count = db.Column(db.Integer, nullable=False)
    total_payments = db.Column(db.Integer, nullable=False)
    total_expenses = db.Column(db.Integer, nullable=False)

    # Snapshots as submitted: [{method, amount}], [{item_id, quantity}], [{product_id, quantity}]
    balances = db.Column(db.JSON, nullable=False, default=list)
    inventory_used = db.Column(db.JSON, nullable=False, default=list)
    products_sold = db.Column(db.JSON, nullable=False, default=list)

    additional_note = db.Column(db.Text, nullable=True)
    submitted_by_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    submitted_by = db.relationship('User', backref=db.backref('daily_reports', lazy=True))

    @property
    def balance_entries(self):
        return [BalanceEntry.model_validate(entry) for entry in self.balances or []]

    @property
    def inventory_lines(self):
        return [InventoryLine.model_validate(entry) for entry in self.inventory_used or []]

    @property
    def product_lines(self):
        return [ProductLine.model_validate(entry) for entry in self.products_sold or []]

    def __repr__(self):
        return f'<DailyReport {self.report_date} #{self.id}>'


class Patient(db.Model):
    """Patient record; only the fields the identifier allocator needs."""
    __tablename__ = 'patient'

    id = db.Column(db.Integer, primary_key=True)
    patient_identifier = db.Column(db.String(20), unique=True, nullable=False, index=True)  # #FDM000001
    name = db.Column(db.String(200), nullable=False)
    phone = db.Column(db.String(30), nullable=True)
    email = db.Column(db.String(120), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<Patient {self.patient_identifier} {self.name}>'


class PatientSequence(db.Model):
    """
    Persistent monotonic counter behind patient identifiers.
    Holds the last number handed out.
    """
    __tablename__ = 'patient_sequence'

    name = db.Column(db.String(50), primary_key=True)
    last_value = db.Column(db.Integer, nullable=False, default=0)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f'<PatientSequence {self.name}={self.last_value}>'


class PaymentPlan(db.Model):
    """
    Installment agreement for a patient's treatment cost.
    """
    __tablename__ = 'payment_plan'

    id = db.Column(db.Integer, primary_key=True)
    patient_id = db.Column(db.Integer, db.ForeignKey('patient.id'), nullable=False, unique=True)

    type = db.Column(db.String(20), nullable=False, default='fixed')  # 'fixed' or 'flexible'
    total_amount = db.Column(db.Integer, nullable=False)
    amount_per_installment = db.Column(db.Integer, nullable=True)  # Only for fixed plans
    payment_frequency = db.Column(db.String(20), nullable=True)  # weekly, biweekly, monthly, custom
    start_date = db.Column(db.DateTime, nullable=False)
    # activated, completed, overdue, paused, outstanding
    status = db.Column(db.String(20), nullable=False, default='activated')
    notes = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    patient = db.relationship('Patient', backref=db.backref('payment_plan', uselist=False))
    payments = db.relationship('Payment', back_populates='payment_plan', lazy=True)

    def __repr__(self):
        return f'<PaymentPlan Patient:{self.patient_id} {self.payment_frequency}>'


class Payment(db.Model):
    """
    Money received from a patient, optionally against a payment plan.
    """
    __tablename__ = 'payment'

    id = db.Column(db.Integer, primary_key=True)
    patient_id = db.Column(db.Integer, db.ForeignKey('patient.id'), nullable=True)
    payment_plan_id = db.Column(db.Integer, db.ForeignKey('payment_plan.id'), nullable=True)

    amount = db.Column(db.Integer, nullable=False)
    method = db.Column(db.String(30), nullable=False)  # cash, card, momo, bank_transfer, ...
    status = db.Column(db.String(20), nullable=False)  # pending, completed, failed, refunded
    description = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    patient = db.relationship('Patient', backref=db.backref('payments', lazy=True))
    payment_plan = db.relationship('PaymentPlan', back_populates='payments')

    def __repr__(self):
        return f'<Payment {self.amount} {self.status}>'
