"""Demo bills loaded when SEED_DEMO_DATA is enabled.

Stored paid/owes values are placeholders; the store recomputes them on load.
"""

DEMO_BILLS = [
    {
        "id": "bill_1",
        "name": "Weekend Trip",
        "description": "Expenses for our weekend trip to the mountains",
        "created_by": "1",
        "created_at": "2023-06-15T10:30:00Z",
        "updated_at": "2023-06-18T14:20:00Z",
        "status": "active",
        "participants": [
            {"id": "part_1", "name": "John Doe", "email": "john@example.com", "is_registered": True},
            {"id": "part_2", "name": "Jane Smith", "email": "jane@example.com", "is_registered": True},
            {"id": "part_3", "name": "Mike Johnson", "email": "mike@example.com", "is_registered": False},
        ],
        "expenses": [
            {
                "id": "exp_1",
                "description": "Cabin Rental",
                "amount": 150,
                "paid_by": "part_1",
                "date": "2023-06-15T12:00:00Z",
                "split_type": "equal",
                "splits": [
                    {"participant_id": "part_1", "amount": 50},
                    {"participant_id": "part_2", "amount": 50},
                    {"participant_id": "part_3", "amount": 50},
                ],
            },
            {
                "id": "exp_2",
                "description": "Groceries",
                "amount": 100,
                "paid_by": "part_1",
                "date": "2023-06-16T09:00:00Z",
                "split_type": "equal",
                "splits": [
                    {"participant_id": "part_1", "amount": 33.34},
                    {"participant_id": "part_2", "amount": 33.33},
                    {"participant_id": "part_3", "amount": 33.33},
                ],
            },
        ],
        "invitation_code": "TRIP2023",
        "is_exclusive": False,
    },
    {
        "id": "bill_2",
        "name": "Dinner Party",
        "description": "Monthly dinner party expenses",
        "created_by": "1",
        "created_at": "2023-07-05T18:00:00Z",
        "updated_at": "2023-07-05T22:30:00Z",
        "status": "active",
        "participants": [
            {"id": "part_1", "name": "John Doe", "email": "john@example.com", "is_registered": True},
            {"id": "part_4", "name": "Sarah Williams", "email": "sarah@example.com", "is_registered": True},
        ],
        "expenses": [
            {
                "id": "exp_3",
                "description": "Food and Drinks",
                "amount": 120,
                "paid_by": "part_1",
                "date": "2023-07-05T19:00:00Z",
                "split_type": "equal",
                "splits": [
                    {"participant_id": "part_1", "amount": 60},
                    {"participant_id": "part_4", "amount": 60},
                ],
            },
        ],
        "invitation_code": "DINNER07",
        "is_exclusive": False,
    },
    {
        "id": "bill_3",
        "name": "Office Supplies",
        "description": "Shared office supplies for the team",
        "created_by": "2",
        "created_at": "2023-05-10T09:00:00Z",
        "updated_at": "2023-05-20T15:45:00Z",
        "status": "archived",
        "participants": [
            {"id": "part_1", "name": "John Doe", "email": "john@example.com", "is_registered": True},
            {"id": "part_2", "name": "Jane Smith", "email": "jane@example.com", "is_registered": True},
            {"id": "part_5", "name": "Alex Brown", "email": "alex@example.com", "is_registered": True},
        ],
        "expenses": [
            {
                "id": "exp_4",
                "description": "Printer Paper",
                "amount": 30,
                "paid_by": "part_2",
                "date": "2023-05-10T10:00:00Z",
                "split_type": "equal",
                "splits": [
                    {"participant_id": "part_1", "amount": 10},
                    {"participant_id": "part_2", "amount": 10},
                    {"participant_id": "part_5", "amount": 10},
                ],
            },
            {
                "id": "exp_5",
                "description": "Ink Cartridges",
                "amount": 45,
                "paid_by": "part_2",
                "date": "2023-05-15T14:30:00Z",
                "split_type": "equal",
                "splits": [
                    {"participant_id": "part_1", "amount": 15},
                    {"participant_id": "part_2", "amount": 15},
                    {"participant_id": "part_5", "amount": 15},
                ],
            },
        ],
        "invitation_code": "OFFICE05",
        "is_exclusive": False,
    },
]
