from billsplit import create_app
app = create_app()
if __name__ == "__main__":
    print("\n" + "="*50)
    print("STARTING BILLSPLIT API ON http://127.0.0.1:5000")
    print("Demo data is kept in memory and lost on restart.")
    print("="*50 + "\n")
    app.run(host='127.0.0.1', port=5000, debug=True)
