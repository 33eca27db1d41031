from nexo_clinic import db


class Food(db.Model):
    __tablename__ = 'foods'
    id = db.Column(db.String(64), primary_key=True)
    name = db.Column(db.String(200), unique=True, nullable=False)

    # Valores por 100 g
    kcal_per_100g    = db.Column(db.Float, nullable=False, default=0.0)
    protein_per_100g = db.Column(db.Float, nullable=False, default=0.0)
    carbs_per_100g   = db.Column(db.Float, nullable=False, default=0.0)
    fat_per_100g     = db.Column(db.Float, nullable=False, default=0.0)

    def to_item(self):
        """Vista inmutable (FoodItem) para el constructor de dietas."""
        from nexo_clinic.services.diet_plan import FoodItem  # import diferido para evitar ciclos
        return FoodItem(
            id=self.id,
            name=self.name,
            kcal=self.kcal_per_100g or 0,
            p=self.protein_per_100g or 0,
            c=self.carbs_per_100g or 0,
            f=self.fat_per_100g or 0,
        )

    def __repr__(self):
        return f'<Food {self.id} {self.name}>'
