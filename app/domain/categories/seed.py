"""Seed catalog for service categories"""

CATEGORY_SEED = [
    {
        "name": "Plumbing",
        "slug": "plumbing",
        "description": "Professional plumbing services including repairs, installations, and maintenance",
        "icon": "🔧",
        "starting_price": 500,
    },
    {
        "name": "Electrical",
        "slug": "electrical",
        "description": "Electrical repairs, installations, and safety inspections",
        "icon": "⚡",
        "starting_price": 300,
    },
    {
        "name": "Cleaning",
        "slug": "cleaning",
        "description": "Home and office cleaning services",
        "icon": "🧹",
        "starting_price": 800,
    },
    {
        "name": "Carpentry",
        "slug": "carpentry",
        "description": "Woodworking, furniture repair, and carpentry services",
        "icon": "🪚",
        "starting_price": 600,
    },
    {
        "name": "Painting",
        "slug": "painting",
        "description": "Interior and exterior painting services",
        "icon": "🎨",
        "starting_price": 400,
    },
    {
        "name": "AC Repair",
        "slug": "ac-repair",
        "description": "Air conditioner installation, repair, and maintenance",
        "icon": "❄️",
        "starting_price": 600,
    },
    {
        "name": "Appliance Repair",
        "slug": "appliance-repair",
        "description": "Repair of washing machines, refrigerators, and other home appliances",
        "icon": "🔌",
        "starting_price": 400,
    },
    {
        "name": "Computer Repair",
        "slug": "computer-repair",
        "description": "Laptop and desktop diagnostics, repair, and setup",
        "icon": "💻",
        "starting_price": 500,
    },
    {
        "name": "Mobile Repair",
        "slug": "mobile-repair",
        "description": "Screen, battery, and board repairs for phones and tablets",
        "icon": "📱",
        "starting_price": 300,
    },
    {
        "name": "Beauty Services",
        "slug": "beauty-services",
        "description": "At-home salon, grooming, and makeup services",
        "icon": "💇",
        "starting_price": 500,
    },
    {
        "name": "Tutoring",
        "slug": "tutoring",
        "description": "Private lessons and exam preparation",
        "icon": "📚",
        "starting_price": 300,
    },
    {
        "name": "Driving",
        "slug": "driving",
        "description": "Driving lessons and personal drivers",
        "icon": "🚗",
        "starting_price": 400,
    },
    {
        "name": "Other",
        "slug": "other",
        "description": "Various other professional services",
        "icon": "🔧",
        "starting_price": 300,
    },
]
