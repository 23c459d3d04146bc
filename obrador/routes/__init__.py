# Obrador - Routes
