from .seeder import SeedStrategy, generate, seeding

__all__ = ["SeedStrategy", "generate", "seeding"]
