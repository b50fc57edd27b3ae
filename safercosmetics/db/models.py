"""
SQLAlchemy ORM Models
Database table definitions using SQLAlchemy ORM.

Rows are reference data loaded by external seed scripts; the API only reads
them. Metrics tables are keyed by the id of the entity they describe.
"""

from sqlalchemy import (
    Column, String, Integer, Boolean, Date, ForeignKey, Numeric, Text, Index
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class Company(Base):
    """Applicant or manufacturer company."""
    __tablename__ = 'companies'

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False, unique=True, index=True)

    metrics = relationship("CompanyMetrics", back_populates="company", uselist=False)

    def __repr__(self):
        return f"<Company(id={self.id}, name={self.name})>"


class CompanyMetrics(Base):
    """
    Company metrics.

    Computed offline from the company's notification history.
    """
    __tablename__ = 'company_metrics'

    company_id = Column(Integer, ForeignKey('companies.id'), primary_key=True)
    total_notifs = Column(Integer, nullable=False)
    first_notified_date = Column(Date, nullable=False)
    cancelled_count = Column(Integer, nullable=False)
    reputation_score = Column(Numeric(3, 2), nullable=False,
                              comment='0-1 composite brand score')

    company = relationship("Company", back_populates="metrics")


class CategoryMetrics(Base):
    """Per-category notification and cancellation counts."""
    __tablename__ = 'category_metrics'

    product_category = Column(String(255), primary_key=True)
    total_notifs = Column(Integer, nullable=False)
    cancelled_count = Column(Integer, nullable=False)
    risk_score = Column(Numeric(3, 2), nullable=False,
                        comment='cancelled_count / total_notifs')


class Product(Base):
    """
    Product notification.

    Status is stored as received from the regulator ('Notified' or
    'Cancelled'). Risk level is never stored, see models.product.
    """
    __tablename__ = 'products'

    id = Column(Integer, primary_key=True)
    notif_no = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)
    category = Column(String(255), nullable=False, index=True)
    applicant_company_id = Column(Integer, ForeignKey('companies.id'), nullable=False)
    manufacturer_company_id = Column(Integer, ForeignKey('companies.id'), nullable=True)
    date_notified = Column(Date, nullable=False)
    status = Column(String(50), nullable=False, index=True)
    reason_for_cancellation = Column(Text, nullable=True)
    is_vertically_integrated = Column(Boolean, nullable=False, default=False,
                                      comment='applicant_company_id == manufacturer_company_id')
    recency_score = Column(Numeric(5, 4), nullable=False, default=0,
                           comment='0-1 normalized within category')

    applicant_company = relationship("Company", foreign_keys=[applicant_company_id])
    manufacturer_company = relationship("Company", foreign_keys=[manufacturer_company_id])

    def __repr__(self):
        return f"<Product(id={self.id}, notif_no={self.notif_no}, status={self.status})>"


class RecommendedAlternative(Base):
    """
    Scored alternative for a cancelled product.

    Written by scripts.generate_recommendations.
    """
    __tablename__ = 'recommended_alternatives'

    id = Column(Integer, primary_key=True)
    cancelled_product_id = Column(Integer, ForeignKey('products.id'), nullable=False)
    recommended_product_id = Column(Integer, ForeignKey('products.id'), nullable=False)
    brand_score = Column(Numeric(5, 4), nullable=False)
    category_risk_score = Column(Numeric(5, 4), nullable=False)
    is_vertically_integrated = Column(Boolean, nullable=False)
    recency_score = Column(Numeric(5, 4), nullable=False)
    relevance_score = Column(Numeric(5, 4), nullable=False,
                             comment='w1*brand + w2*manufacturer - w3*risk + w4*recency + w5*vertical')

    recommended_product = relationship("Product", foreign_keys=[recommended_product_id])

    __table_args__ = (
        Index('idx_reco_cancelled', 'cancelled_product_id'),
        Index('idx_reco_recommended', 'recommended_product_id'),
    )


class BannedIngredient(Base):
    """Banned or restricted cosmetic ingredient."""
    __tablename__ = 'banned_ingredients'

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False, unique=True, index=True)
    alternative_names = Column(Text, nullable=True, comment='Comma-separated INCI names/synonyms')
    health_risk_description = Column(Text, nullable=False)
    regulatory_status = Column(String(100), nullable=True)
    source_url = Column(String(500), nullable=True)
    ewg_rating = Column(Integer, nullable=True, comment='EWG hazard rating 1-10')
    pubchem_cid = Column(Integer, nullable=True)
    pubchem_url = Column(String(500), nullable=True)

    metrics = relationship("BannedIngredientMetrics", back_populates="ingredient", uselist=False)


class CancelledProductIngredient(Base):
    """Links a cancelled product to a banned ingredient it contained."""
    __tablename__ = 'cancelled_product_ingredients'

    cancelled_product_id = Column(Integer, ForeignKey('products.id'), primary_key=True)
    banned_ingredient_id = Column(Integer, ForeignKey('banned_ingredients.id'), primary_key=True)

    __table_args__ = (
        Index('idx_cpi_product', 'cancelled_product_id'),
        Index('idx_cpi_ingredient', 'banned_ingredient_id'),
    )


class BannedIngredientMetrics(Base):
    """Occurrences of a banned ingredient among cancelled notifications."""
    __tablename__ = 'banned_ingredient_metrics'

    ingredient_id = Column(Integer, ForeignKey('banned_ingredients.id'), primary_key=True)
    occurrences_count = Column(Integer, nullable=False)
    first_appearance_date = Column(Date, nullable=False)
    last_appearance_date = Column(Date, nullable=False)
    risk_score = Column(Numeric(3, 2), nullable=False)

    ingredient = relationship("BannedIngredient", back_populates="metrics")
