"""Example usage of the simple_db library."""

from pathlib import Path

from simple_db import PersistentDatabase, TypeTag, Value

# Create a database file (written immediately)
path = Path("./example_data/people.sdb")
db = PersistentDatabase.create("example", path)

db.create_table("people", [TypeTag.TEXT, TypeTag.INTEGER, TypeTag.CHAR])

people = [
    ("Alice", 30, "A"),
    ("Bob", 25, "B"),
    ("Charlie", 35, "C"),
    ("Diana", 28, "D"),
    ("Eve", 22, "E"),
]

print("Inserting people...")
for name, age, initial in people:
    db.insert_row("people", [Value.text(name), Value.integer(age), Value.char(initial)])

db.create_table("signals", [TypeTag.TEXT, TypeTag.COMPLEX_REAL])
db.insert_row("signals", [Value.text("carrier"), Value.complex_real(1.0, -0.5)])
db.insert_row("signals", [Value.text("echo"), Value.complex_real(0.25, 2.0)])

db.save()

# Reload from disk and display
loaded = PersistentDatabase.load(path)
print(f"\nTables in {loaded.name!r}: {sorted(loaded.table_names())}")

print("\nPeople by age:")
for row in loaded.sorted_rows("people", 1):
    print(f"  {row}")

print("\nSignals:")
for row in loaded.sorted_rows("signals"):
    print(f"  {row}")

print("\n" + "=" * 60)
print("You can inspect this file with the command-line tools:")
print(f"  sdb-dump {path}")
print(f"  sdb-dump {path} people --sort-by 0")
print(f"  sdb --db {path} rows people --sort-by 1")
